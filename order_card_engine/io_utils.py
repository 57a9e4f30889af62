from __future__ import annotations

import json


def read_json_content(file_obj):
    """Read JSON content from an uploaded file, a file path, or raw JSON text."""
    if file_obj is None:
        raise ValueError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, bytes):
            content = content.decode('utf-8')
        return json.loads(content)

    if isinstance(file_obj, str) and file_obj.lstrip()[:1] in ('{', '['):
        return json.loads(file_obj)

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def read_optional_json(text):
    """Parse a JSON textbox; blank means "not supplied"."""
    if text is None or not str(text).strip():
        return None
    return json.loads(text)
