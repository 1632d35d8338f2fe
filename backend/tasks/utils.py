def build_comment_threads(comments):
    """
    Group serialized comments into threads.

    Each top-level comment gets a `replies` list holding every comment
    beneath it, at any depth, in the original order. A reply whose parent
    is missing from `comments` is treated as top-level.
    """
    by_id = {comment['id']: comment for comment in comments}

    def root_of(comment):
        seen = set()
        current = comment
        while current.get('parent_comment_id') in by_id and current['id'] not in seen:
            seen.add(current['id'])
            current = by_id[current['parent_comment_id']]
        return current

    threads = []
    thread_by_root = {}
    for comment in comments:
        root = root_of(comment)
        if root is comment:
            thread = dict(comment, replies=[])
            thread_by_root[comment['id']] = thread
            threads.append(thread)

    for comment in comments:
        root = root_of(comment)
        if root is not comment:
            thread_by_root[root['id']]['replies'].append(comment)

    return threads
