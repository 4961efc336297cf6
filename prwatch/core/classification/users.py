from typing import Optional

BOT_SUFFIXES = ("[bot]", "-bot")
BOT_PATTERNS = (
    "dependabot",
    "renovate",
    "codecov",
    "github-actions",
    "mergify",
    "semantic-release",
    "vercel",
    "netlify",
)
HUMAN_ACCOUNT_TYPE = "User"


def is_self(login: Optional[str], username: str) -> bool:
    return (login or "").lower() == username.lower()


def is_real_user(login: str, excluding_username: str) -> bool:
    """Heuristic check that ``login`` is a human other than ``excluding_username``.

    Accounts ending in ``[bot]``/``-bot`` or containing a well-known automation
    name are treated as bots. Unlisted bots slip through.
    """
    lowered = login.lower()
    if lowered == excluding_username.lower():
        return False
    if lowered.endswith(BOT_SUFFIXES):
        return False
    return not any(pattern in lowered for pattern in BOT_PATTERNS)


def is_external_human(
    login: Optional[str],
    account_type: Optional[str],
    username: str,
) -> bool:
    if not login or account_type != HUMAN_ACCOUNT_TYPE:
        return False
    return is_real_user(login, username)
