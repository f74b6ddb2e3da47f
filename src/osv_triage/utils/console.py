"""
Console helpers for user-facing output and interactive prompts.
"""
import sys

YES_ANSWERS = {"o", "oui", "y", "yes"}
NO_ANSWERS = {"n", "non", "no"}


def print_error(message: str) -> None:
    print(f"❌  {message}", file=sys.stderr)


def print_success(message: str) -> None:
    print(f"✅  {message}")


def print_info(message: str) -> None:
    print(f"ℹ️  {message}")


def print_warning(message: str) -> None:
    print(f"⚠️  {message}")


def question(msg: str) -> str:
    """Ask the user a question and return the trimmed answer."""
    return input(f"{msg} : ").strip()


def ask_confirmation(prompt: str, default: bool = False) -> bool:
    """
    Ask a yes/no question until a recognised answer is given.

    Args:
        prompt: The question to display.
        default: Value returned for an empty answer.
    """
    suffix = " (Y/n)" if default else " (y/N)"
    while True:
        response = question(prompt + suffix).lower()
        if not response:
            return default
        if response in YES_ANSWERS:
            return True
        if response in NO_ANSWERS:
            return False
        print("Please answer 'y' (yes) or 'n' (no)")
