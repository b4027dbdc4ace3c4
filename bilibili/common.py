"""
Common constants for the Bilibili web API.

Shared by the client and its configuration loader.
"""

# Landing page that issues the anonymous ``buvid3`` device cookie.
LANDING_URL = "https://www.bilibili.com/"

# The API rejects requests without a site-of-origin referer.
REFERER = "https://www.bilibili.com"

BUVID3_COOKIE = "buvid3"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.0.0"
)
