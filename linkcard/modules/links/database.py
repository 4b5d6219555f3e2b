"""
Links Database
==============

Links live in one table, ordered by position. Every write is last-write-wins.
"""

import time
from datetime import datetime, timezone

from linkcard.core import Database

DEFAULT_ICON_NAME = 'link'
DEFAULT_ICON_TYPE = 'simple'

_COLUMNS = 'id, title, url, subtitle, icon_name, icon_type, position, created_at, updated_at'


def utc_timestamp():
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _text(value):
    if value is None:
        return ''
    return str(value).strip()


def clean_link_fields(data):
    """Normalize title/url/subtitle/iconName/iconType from a request body.

    Returns a dict of column values, or None when title or url is missing.
    """
    if not isinstance(data, dict):
        return None

    title = _text(data.get('title'))
    url = _text(data.get('url'))
    if not title or not url:
        return None

    return {
        'title': title,
        'url': url,
        'subtitle': _text(data.get('subtitle')),
        'icon_name': _text(data.get('iconName')) or DEFAULT_ICON_NAME,
        'icon_type': _text(data.get('iconType')) or DEFAULT_ICON_TYPE,
    }


def row_to_link(row):
    return {
        'id': row['id'],
        'title': row['title'],
        'url': row['url'],
        'subtitle': row['subtitle'],
        'iconName': row['icon_name'],
        'iconType': row['icon_type'],
        'createdAt': row['created_at'],
        'updatedAt': row['updated_at'],
    }


def _generate_link_id(cursor):
    """Millisecond timestamp, bumped until it is free"""
    candidate = int(time.time() * 1000)
    while cursor.execute('SELECT 1 FROM links WHERE id = ?', (str(candidate),)).fetchone():
        candidate += 1
    return str(candidate)


def _fetch_link(cursor, link_id):
    cursor.execute(f'SELECT {_COLUMNS} FROM links WHERE id = ?', (link_id,))
    row = cursor.fetchone()
    return row_to_link(row) if row else None


def get_all_links_db():
    """Get all links in display order"""
    with Database.connect() as conn:
        rows = conn.execute(
            f'SELECT {_COLUMNS} FROM links ORDER BY position ASC, created_at ASC'
        ).fetchall()
    return [row_to_link(row) for row in rows]


def create_link_db(fields):
    """Append a new link and return it"""
    with Database.connect() as conn:
        cursor = conn.cursor()
        link_id = _generate_link_id(cursor)

        cursor.execute('SELECT MAX(position) FROM links')
        max_position = cursor.fetchone()[0]
        position = 0 if max_position is None else max_position + 1

        cursor.execute('''
            INSERT INTO links (id, title, url, subtitle, icon_name, icon_type, position, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ''', (link_id, fields['title'], fields['url'], fields['subtitle'],
              fields['icon_name'], fields['icon_type'], position, utc_timestamp()))

        return _fetch_link(cursor, link_id)


def update_link_db(link_id, fields):
    """Update a link; returns the updated link or None when it doesn't exist"""
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute('''
            UPDATE links
            SET title = ?, url = ?, subtitle = ?, icon_name = ?, icon_type = ?, updated_at = ?
            WHERE id = ?
        ''', (fields['title'], fields['url'], fields['subtitle'],
              fields['icon_name'], fields['icon_type'], utc_timestamp(), link_id))

        if cursor.rowcount == 0:
            return None
        return _fetch_link(cursor, link_id)


def delete_link_db(link_id):
    """Delete a link; returns the deleted link or None"""
    with Database.connect() as conn:
        cursor = conn.cursor()
        link = _fetch_link(cursor, link_id)
        if link is None:
            return None
        cursor.execute('DELETE FROM links WHERE id = ?', (link_id,))
        return link


def prepare_bulk_links(items):
    """Validate a bulk replacement list.

    Returns (rows, error). rows are column dicts in display order;
    error is a message when the list can't be accepted.
    """
    if not isinstance(items, list):
        return None, 'Invalid bulk operation'

    rows = []
    seen_ids = set()
    for index, item in enumerate(items):
        fields = clean_link_fields(item)
        if fields is None:
            return None, f'Link {index + 1}: Title and URL are required'

        link_id = _text(item.get('id'))
        if link_id:
            if link_id in seen_ids:
                return None, f'Duplicate link id: {link_id}'
            seen_ids.add(link_id)

        fields['id'] = link_id or None
        fields['created_at'] = _text(item.get('createdAt')) or None
        fields['updated_at'] = _text(item.get('updatedAt')) or None
        rows.append(fields)

    return rows, None


def replace_links_db(rows):
    """Replace the whole list with prepared rows; returns the new count"""
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute('DELETE FROM links')

        taken = {row['id'] for row in rows if row['id']}
        now = utc_timestamp()
        for position, row in enumerate(rows):
            link_id = row['id']
            if not link_id:
                link_id = _generate_link_id(cursor)
                while link_id in taken:
                    link_id = str(int(link_id) + 1)
                taken.add(link_id)

            cursor.execute('''
                INSERT INTO links (id, title, url, subtitle, icon_name, icon_type, position, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ''', (link_id, row['title'], row['url'], row['subtitle'], row['icon_name'],
                  row['icon_type'], position, row['created_at'] or now, row['updated_at']))

    return len(rows)


def reorder_links_db(id_order):
    """Reorder links by list of IDs.

    The list must contain every current id exactly once; returns False otherwise.
    """
    id_order = [str(link_id) for link_id in id_order]

    with Database.connect() as conn:
        cursor = conn.cursor()
        current_ids = {row['id'] for row in cursor.execute('SELECT id FROM links').fetchall()}
        if len(id_order) != len(set(id_order)) or set(id_order) != current_ids:
            return False

        for position, link_id in enumerate(id_order):
            cursor.execute('UPDATE links SET position = ? WHERE id = ?', (position, link_id))
        return True
