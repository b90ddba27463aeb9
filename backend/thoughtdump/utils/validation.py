from __future__ import annotations


def validate_password_strength(password: str) -> tuple[bool, str | None]:
    """Validate password strength."""
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"

    weak_passwords = {"password", "123456", "12345678", "qwerty", "admin", "test", "password123"}
    if password.lower() in weak_passwords:
        return False, "Password is too weak. Please choose a stronger password."
    if password.isalpha() or password.isdigit():
        return False, "Password must mix letters with numbers or symbols"
    return True, None
