import platform

# platform.system() -> OS token of a desktop Chrome User-Agent
_OS_TOKENS = {
    "Windows": "Windows NT 10.0; Win64; x64",
    "Darwin": "Macintosh; Intel Mac OS X 10_15_7",
    "Linux": "X11; Linux x86_64",
}

PROBE_PRODUCT = "mailcheck-linkprobe/0.1"


def generate_default_user_agent(chrome_version: str = "120.0.0.0", product: str = PROBE_PRODUCT) -> str:
    """
    Desktop Chrome User-Agent for HEAD probes, followed by the probe's own
    product token.

    Args:
        chrome_version (str): Chrome version to advertise (user_agent.chrome_version).
        product (str): Trailing product token; empty to leave it out.
    """
    os_token = _OS_TOKENS.get(platform.system(), "Unknown OS")
    agent = (
        f"Mozilla/5.0 ({os_token}) AppleWebKit/537.36 (KHTML, like Gecko) "
        f"Chrome/{chrome_version} Safari/537.36"
    )
    return f"{agent} {product}" if product else agent
