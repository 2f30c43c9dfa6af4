"""
GitNotes Backend — HTML Pages
===============================

What:  The static index page (form + note list) and the note detail page.
How:   Plain strings; the index page's script talks to the JSON routes.

Note text is inserted into the detail page as stored, without escaping.
"""

from gitnotes.schemas.note import Note

INDEX_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Notes App</title>
  <style>
    body { font-family: Arial, sans-serif; padding: 20px; }
    input, button, textarea { margin: 5px 0; width: 100%; }
    .note { padding: 10px; background-color: #f4f4f4; margin-bottom: 10px; }
  </style>
</head>
<body>
  <h1>Notes App</h1>
  <form id="noteForm">
    <input type="text" id="title" placeholder="Note Title" required /><br>
    <textarea id="content" rows="4" placeholder="Write your note here..." required></textarea><br>
    <button type="submit">Create Note</button>
  </form>
  <h2>All Notes</h2>
  <div id="notesContainer"></div>
  <script>
    const form = document.getElementById('noteForm');
    const titleInput = document.getElementById('title');
    const contentInput = document.getElementById('content');

    form.addEventListener('submit', async (event) => {
      event.preventDefault();
      const response = await fetch('/notes', {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify({ title: titleInput.value, content: contentInput.value })
      });
      if (response.ok) {
        titleInput.value = '';
        contentInput.value = '';
        loadNotes();
      } else {
        alert('Failed to create note');
      }
    });

    function link(href, text) {
      const a = document.createElement('a');
      a.href = href;
      a.textContent = text;
      return a;
    }

    async function loadNotes() {
      const response = await fetch('/notes');
      const notes = await response.json();
      const container = document.getElementById('notesContainer');
      container.innerHTML = '';
      for (const note of notes) {
        const div = document.createElement('div');
        div.classList.add('note');
        div.appendChild(link('/notes/' + note.id, note.title));
        div.appendChild(link('/notes/raw/' + note.id, ' (Raw)'));
        container.appendChild(div);
      }
    }

    window.onload = loadNotes;
  </script>
</body>
</html>
"""


def render_note_page(note: Note) -> str:
    """Detail view for GET /notes/{id}."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{note.title}</title>
</head>
<body>
  <h1>{note.title}</h1>
  <pre>{note.content}</pre>
</body>
</html>
"""
