import os


def ensure_directory_exists(path: str) -> str:
    os.makedirs(path, exist_ok=True)
    return path
