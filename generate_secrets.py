#!/usr/bin/env python3
"""
Generate a secure SECRET_KEY for the bowling league application
"""

import secrets


def generate_secrets():
    """Generate secure random keys for the application"""
    print("Generating secure secrets for the bowling league...")
    print("=" * 50)

    secret_key = secrets.token_urlsafe(32)

    print(f"SECRET_KEY={secret_key}")

    print("=" * 50)
    print("Copy this value to your .env file")
    print("Keep it secure and never commit it to version control!")


if __name__ == "__main__":
    generate_secrets()
