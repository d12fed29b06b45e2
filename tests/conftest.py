import os

# Settings reads the environment when the app module is imported during collection
os.environ.setdefault("ENV", "test")
