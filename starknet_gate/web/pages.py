"""HTML for the analytics pages.

Pages are small enough to be built from strings. Everything coming from
Discord or storage goes through :func:`html.escape`.
"""

from __future__ import annotations

from html import escape

# cycled through for the distribution bars
COLORS = ("#FF6384", "#36A2EB", "#FFCE56", "#4BC0C0")

_LAYOUT = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
{head}<title>{title}</title>
<style>
body {{ font-family: sans-serif; max-width: 720px; margin: 2rem auto; }}
.bar {{ height: 1rem; display: inline-block; }}
.row {{ margin: .5rem 0; }}
</style>
</head>
<body>
{body}
</body>
</html>
"""


def _page(title: str, body: str, head: str = "") -> str:
    return _LAYOUT.format(title=escape(title), body=body, head=head)


def redirect_notice(title: str, description: str, redirect_to: str, delay: int) -> str:
    """A notice that sends the browser to ``redirect_to`` after ``delay`` seconds."""
    target = escape(redirect_to, quote=True)
    head = f'<meta http-equiv="refresh" content="{int(delay)};url={target}">\n'
    body = (
        f"<h1>{escape(title)}</h1>\n"
        f"<p>{escape(description)}</p>\n"
        f'<p><a href="{target}">Go now</a></p>'
    )
    return _page(title, body, head)


def session_expired(redirect_to: str, delay: int) -> str:
    return redirect_notice(
        "Session Expired",
        "Your access token has expired. You'll be redirected shortly.",
        redirect_to,
        delay,
    )


def server_not_found(redirect_to: str, delay: int) -> str:
    return redirect_notice(
        "Server Not Found",
        "We could not find the server associated with this link. "
        "Redirecting to the home page.",
        redirect_to,
        delay,
    )


def unavailable(redirect_to: str, delay: int) -> str:
    return redirect_notice(
        "Something Went Wrong",
        "Server analytics are unavailable right now. Redirecting to the home page.",
        redirect_to,
        delay,
    )


def analytics_page(guild_name: str, stats: dict[str, int]) -> str:
    """Render the network distribution, or the no-data message when empty."""
    parts = [
        "<h1>Server Analytics</h1>",
        f"<p><span>Server Analytics for Guild:</span> <b>{escape(guild_name)}</b></p>",
        "<h2>Distribution of networks among connected wallets:</h2>",
    ]
    total = sum(stats.values())
    if not stats or total == 0:
        parts.append("<p>No user has connected their wallet at the moment.</p>")
    else:
        parts.append('<div class="distribution">')
        for i, (network, count) in enumerate(stats.items()):
            share = count / total * 100
            color = COLORS[i % len(COLORS)]
            parts.append(
                '<div class="row">'
                f'<span class="bar" style="width: {share:.1f}%; background: {color}"></span> '
                f"<b>{escape(network)}</b>: {count} ({share:.1f}%)"
                "</div>"
            )
        parts.append("</div>")
    return _page(f"Analytics - {guild_name}", "\n".join(parts))


def home_page() -> str:
    return _page(
        "Starknet Gate",
        "<h1>Starknet Gate</h1>\n"
        "<p>Link your Starknet wallet to your Discord server membership.</p>",
    )
