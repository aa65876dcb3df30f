"""
Manual smoke test against a live wiki.

Reads MW_ADAPTER_* settings from the environment / .env, applies them (logging
in if bot credentials are set), then fetches one page and runs one search.

    export PYTHONPATH=src
    python3 scripts/check_connection.py "Main Page"
"""

import asyncio
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from mediawiki_adapter.config import Settings
from mediawiki_adapter.core.errors import AdapterError
from mediawiki_adapter.core.log_config import configure_logging
from mediawiki_adapter.runtime import AdapterRuntime


async def main(title: str) -> int:
    settings = Settings()
    configure_logging(settings.log_level)
    runtime = AdapterRuntime(settings)

    print(f"MediaWiki API: {settings.mediawiki_api_base}")
    print(f"Wikibase API:  {settings.wikibase_api_base}")

    try:
        login = await runtime.configure()
        if login is None:
            print("No bot credentials; running anonymously.")
        else:
            print(f"Logged in as {login.username} (session cookie: {login.authenticated})")

        text = await runtime.mediawiki.get_page_wikitext(title)
        print(f"Fetched '{title}': {len(text)} characters")

        titles = await runtime.mediawiki.search_pages(title, limit=5)
        print(f"Search '{title}': {titles}")
    except AdapterError as exc:
        print(f"FAILED ({type(exc).__name__}): {exc}")
        return 1

    return 0


if __name__ == "__main__":
    page = sys.argv[1] if len(sys.argv) > 1 else "Main Page"
    sys.exit(asyncio.run(main(page)))
