import secrets
import string
import re

def generate_password():
    adjectives = ["Happy", "Sunny", "Clever", "Brave", "Calm", "Eager", "Fancy", "Jolly", "Kind", "Lively"]
    nouns = ["Tiger", "Lion", "Eagle", "Panda", "Bear", "Wolf", "Fox", "Hawk", "Owl", "Deer"]

    adj = secrets.choice(adjectives)
    noun = secrets.choice(nouns)
    number = secrets.randbelow(1000)

    return f"{adj}-{noun}-{number:03d}"

def generate_username(name: str):
    # lowercase name + random suffix
    base = name.lower().replace(" ", "")[:10]
    suffix = ''.join(secrets.choice(string.digits) for i in range(4))
    return f"{base}{suffix}"

def slugify(name: str) -> str:
    slug = name.lower()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    return slug.strip('-')

def generate_slug(name: str) -> str:
    # Random suffix keeps tenant slugs unique
    suffix = ''.join(secrets.choice(string.digits) for i in range(4))
    return f"{slugify(name)}-{suffix}"

def format_sequence(prefix: str, value: int) -> str:
    return f"{prefix}{value:06d}"

def split_name(full_name: str) -> tuple[str, str]:
    parts = full_name.split()
    if len(parts) == 1:
        return parts[0], parts[0]
    return " ".join(parts[:-1]), parts[-1]
