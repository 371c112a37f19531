from html import escape

POSTS = {"1": "Hello, wren", "2": "Route precedence"}


def default():
    items = "".join(f'<li><a href="/posts/{pid}">{escape(title)}</a></li>' for pid, title in POSTS.items())
    return f"<h1>Posts</h1><ul>{items}</ul>"
