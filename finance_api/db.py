# finance_api/db.py
import os
import sqlite3

from flask import current_app, g

SCHEMA_FILE = os.path.join(os.path.dirname(__file__), "schema.sql")


def get_db():
    db = getattr(g, '_database', None)
    if db is None:
        db_path = current_app.config["DB_PATH"]
        # ensure directory exists
        os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
        db = g._database = sqlite3.connect(db_path)
        db.row_factory = sqlite3.Row
    return db


def close_db(exception=None):
    db = g.pop('_database', None)
    if db is not None:
        db.close()


def query_db(query, args=(), one=False):
    cur = get_db().execute(query, args)
    rv = cur.fetchall()
    cur.close()
    return (rv[0] if rv else None) if one else rv


def execute_db(query, args=()):
    """Run a single write and commit it. Returns the last row id."""
    conn = get_db()
    cur = conn.cursor()
    cur.execute(query, args)
    conn.commit()
    last = cur.lastrowid
    cur.close()
    return last


def init_db():
    """
    Create the tables from schema.sql. The script uses IF NOT EXISTS,
    so this is safe to call at every app startup.
    """
    if not os.path.exists(SCHEMA_FILE):
        raise FileNotFoundError(f"schema.sql not found at expected path: {SCHEMA_FILE}")

    with open(SCHEMA_FILE, 'r', encoding='utf-8') as f:
        sql = f.read()
    conn = get_db()
    conn.executescript(sql)
    conn.commit()
