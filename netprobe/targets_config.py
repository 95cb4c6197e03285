# netprobe/targets_config.py
"""
Built-in defaults for netprobe.

Keep it simple:
 - each target group is a list of {"name", "address"} dicts
 - web addresses are full URLs, ping addresses are host names or IPs
 - "auto:gateway" / "auto:dns-server" are filled in at run time
 - a JSON config file (see config.load_config) overrides any of these
"""

PING_COUNT = 4
PING_TIMEOUT_MS = 1000
WEB_TIMEOUT_S = 5.0

DNS_TEST_DOMAIN = "www.google.com"

THRESHOLDS = {
    "ping_avg_warn_ms": 50,
    "ping_avg_fail_ms": 150,
    "ping_loss_warn_pct": 1,
    "ping_loss_fail_pct": 10,
    "ping_jitter_warn_ms": 10,
    "ping_jitter_fail_ms": 30,
    "web_warn_ms": 1000,
    "web_fail_ms": 3000,
}

TARGETS = {
    # Intranet services; replace with your own
    "internal_web": [],
    "internal_ping": [],

    # Public baseline
    "external_web": [
        {"name": "Google", "address": "https://www.google.com/generate_204"},
        {"name": "Cloudflare", "address": "https://1.1.1.1/"},
        {"name": "Microsoft", "address": "https://www.microsoft.com/"},
        {"name": "GitHub", "address": "https://github.com/"},
    ],
    "external_ping": [
        {"name": "Cloudflare DNS", "address": "1.1.1.1"},
        {"name": "Google DNS", "address": "8.8.8.8"},
        {"name": "Quad9 DNS", "address": "9.9.9.9"},
    ],
}
