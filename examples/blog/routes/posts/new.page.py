def default():
    return '<h1>New post</h1><form method="post" action="/api/posts"></form>'
