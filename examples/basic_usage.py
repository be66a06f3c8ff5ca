"""Basic usage example for Page-O-Matic page composition."""

from pageomatic.sections.types import MediaSlot
from pageomatic.services.composition import visible_sections
from pageomatic.services.edit_session import EditSession
from pageomatic.storage import Database


def main():
    """Demonstrate composing, saving and reloading a page."""
    # Initialize database (uses SQLite by default)
    db = Database()

    # Create tables
    db.create_tables()

    # Open the about page and start editing
    editor = EditSession("about", db)
    editor.mount()
    editor.enter_edit()
    print(f"Loaded page with {len(editor.document)} sections")

    # Add a media/text section after the hero and fill it in
    editor.insert("media-text-right", after_index=0)
    editor.patch(1, {"title": "Who we are", "description": "A small team with big ideas."})
    print(f"Inserted section: {editor.document.sections[1]['id']}")

    # Pick an image for it; the picker answers later with the request id
    request = editor.request_media(1, MediaSlot.MEDIA, accept="image")
    editor.complete_media(request.request_id, "https://cdn.example.com/team.jpg", "image")

    # Page-wide settings
    editor.update_properties({"pageTitle": "About us", "backgroundColor": "#fafafa"})

    # Save as an acting user
    result = editor.save("admin")
    if result.ok:
        print(f"Saved components: {result.saved}")
    else:
        for name, error in result.failures.items():
            print(f"Failed to save {name}: {error}")

    editor.leave_edit()

    # Reload in a fresh session
    print("\n--- Reload ---")
    viewer = EditSession("about", db)
    viewer.mount()
    for section in visible_sections(viewer.document):
        print(f"  - {section['type']} ({section['id']})")

    print("\n✅ All operations completed successfully!")


if __name__ == "__main__":
    main()
