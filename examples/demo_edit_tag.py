"""
CLI demo that lists tags, lets you pick one and rename or delete it through
the edit-tag dialog.

Install tagedit with the interactive extra before running the demo::

    pip install -e ".[interactive]"

Optionally set ``CONTENT_HOST`` / ``CONTENT_PORT`` / ``CONTENT_DATASET`` /
``CONTENT_TOKEN`` environment variables if your content API is not available
at the defaults (``localhost:3333``, dataset ``production``).
"""

import logging

from tagedit import Workspace
from tagedit.tools.tags import choose_tag, edit_tag

logging.basicConfig(level=logging.INFO)

def main() -> None:
    with Workspace() as workspace:
        # Load every tag into the store
        workspace.tags.fetch_all()
        workspace.tags.process_pending(wait=True)

        tags = [item.tag for item in map(workspace.tags.select_by_id, workspace.tags.ids) if item and item.tag]
        print(f"Fetched {len(tags)} tags")

        # Let user choose a tag
        tag = choose_tag(tags)
        if not tag:
            return

        outcome = edit_tag(workspace, tag["_id"])
        print(f"\nOutcome: {outcome}")


if __name__ == "__main__":
    main()
