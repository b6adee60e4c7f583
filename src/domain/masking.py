"""Email masking for log output."""


def mask_email(email: str | None) -> str:
    """
    Mask an email address for logging.

    john.doe@example.com -> j***e@example.com
    """
    if not email or len(email) < 3:
        return "***"
    at_index = email.find("@")
    if at_index < 0:
        return email[0] + "***"
    if at_index <= 1:
        return email[0] + "***@" + email[at_index + 1 :]
    return email[0] + "***" + email[at_index - 1] + email[at_index:]
