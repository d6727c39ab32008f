from signoff.config import settings


def match_role(email: str | None) -> dict:
    """Resolve a team role; explicit email lists win over domain lists."""
    lower = (email or "").strip().lower()
    if not lower:
        return {"role": "creator", "locked": False}
    domain = lower.partition("@")[2]

    if lower in settings.team_reviewer_emails:
        return {"role": "reviewer", "locked": True}
    if lower in settings.team_creator_emails:
        return {"role": "creator", "locked": True}
    if domain and domain in settings.team_reviewer_domains:
        return {"role": "reviewer", "locked": True}
    if domain and domain in settings.team_creator_domains:
        return {"role": "creator", "locked": True}
    return {"role": "creator", "locked": False}


def is_allowed(email: str | None) -> bool:
    """Team allowlist check; empty lists leave the API open even when enforced."""
    if not settings.team_enforce_allowlist:
        return True
    if not settings.team_allowed_emails and not settings.team_allowed_domains:
        return True
    lower = (email or "").strip().lower()
    if lower in settings.team_allowed_emails:
        return True
    domain = lower.partition("@")[2]
    return bool(domain) and domain in settings.team_allowed_domains
