def default():
    return '<h1>Blog</h1><p><a href="/posts">All posts</a></p>'
