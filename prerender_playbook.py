"""
Playbook Pre-Rendering Script
=============================
This script pre-renders preview SVGs for every play in the playbook and
uploads them to Supabase Storage.

Usage:
1. Set SUPABASE_URL and SUPABASE_KEY in your .env file
2. Run: python prerender_playbook.py [--team-id TEAM] [--play-id ID] [--output-dir DIR]

The script will:
- Fetch plays from the playbook_plays table
- Render an SVG preview for each play
- Upload the SVG to the play-previews bucket (or write it to --output-dir)
"""

from pathlib import Path
from typing import Optional

from supabase import create_client

from play_engine.config import get_settings
from play_engine.persistence import PLAYS_TABLE, SavedPlay
from play_engine.renderer import render_to_string

# Storage bucket name
PREVIEW_BUCKET = "play-previews"


# ============================================================
# UPLOAD FUNCTIONS
# ============================================================

def upload_to_storage(supabase, bucket: str, filename: str, content: str, content_type: str) -> Optional[str]:
    """Upload content to Supabase Storage and return the public URL"""
    storage = supabase.storage.from_(bucket)
    options = {"content-type": content_type}
    try:
        storage.upload(filename, content.encode('utf-8'), options)
    except Exception as e:
        if "already exists" not in str(e).lower() and "duplicate" not in str(e).lower():
            print(f"    Error uploading to storage: {e}")
            return None
        # Re-rendered preview: overwrite the old file
        try:
            storage.update(filename, content.encode('utf-8'), options)
        except Exception as update_error:
            print(f"    Error updating storage object: {update_error}")
            return None
    return storage.get_public_url(filename)


# ============================================================
# PRE-RENDER
# ============================================================

def fetch_plays(supabase, team_id: Optional[str] = None, play_id: Optional[str] = None):
    query = supabase.table(PLAYS_TABLE).select('*')
    if play_id:
        query = query.eq('id', play_id)
    elif team_id:
        query = query.eq('team_id', team_id)
    return query.order('play_code').execute().data or []


def prerender_playbook(
    team_id: Optional[str] = None,
    play_id: Optional[str] = None,
    output_dir: Optional[str] = None,
):
    """Main function to pre-render play previews"""
    settings = get_settings()
    if not settings.has_supabase:
        print("ERROR: Missing Supabase credentials! Set SUPABASE_URL and SUPABASE_KEY.")
        return 1

    supabase = create_client(settings.supabase_url, settings.supabase_key)

    print("Fetching plays from Supabase...")
    rows = fetch_plays(supabase, team_id=team_id, play_id=play_id)
    print(f"Found {len(rows)} plays")

    if output_dir:
        Path(output_dir).mkdir(parents=True, exist_ok=True)

    success_count = 0
    error_count = 0

    for i, row in enumerate(rows):
        try:
            play = SavedPlay.from_row(row)
        except (KeyError, ValueError) as e:
            print(f"\n[{i+1}/{len(rows)}] Skipping unreadable play {row.get('id')}: {e}")
            error_count += 1
            continue

        print(f"\n[{i+1}/{len(rows)}] Processing: {play.play_code} {play.play_name}")

        print("  Rendering SVG...")
        svg_content = render_to_string(play.diagram)
        filename = f"{play.id}.svg"

        if output_dir:
            path = Path(output_dir) / filename
            path.write_text(svg_content)
            print(f"  ✓ Written: {path}")
            success_count += 1
            continue

        print("  Uploading SVG...")
        url = upload_to_storage(supabase, PREVIEW_BUCKET, filename, svg_content, "image/svg+xml")
        if url:
            print(f"  ✓ SVG uploaded: {url[:50]}...")
            success_count += 1
        else:
            error_count += 1

    print(f"\n{'='*50}")
    print("Pre-rendering complete!")
    print(f"  Success: {success_count}")
    print(f"  Errors: {error_count}")
    return 0 if error_count == 0 else 1


# ============================================================
# MAIN
# ============================================================

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Pre-render playbook SVGs and upload to Supabase')
    parser.add_argument('--team-id', help='Only process plays for this team')
    parser.add_argument('--play-id', help='Only process a specific play by ID')
    parser.add_argument('--output-dir', help='Write SVGs to this directory instead of uploading')

    args = parser.parse_args()
    exit(prerender_playbook(team_id=args.team_id, play_id=args.play_id, output_dir=args.output_dir))
