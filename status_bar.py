import os
import time


def render_status(context, width):
    """
    context keys: status_msg, status_until, loading, file_path, dirty,
                  visible_rows, total_rows, sort, filter_count, view_mode
    """
    text = ""
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    elif context.get("loading"):
        text = " Loading…"
    else:
        fname = context.get("file_path") or ""
        if fname:
            fname = os.path.basename(fname)
        if context.get("dirty"):
            fname = f"{fname} [+]" if fname else "[+]"
        rows = f"{context.get('visible_rows', 0)}/{context.get('total_rows', 0)} rows"
        parts = [fname, rows]
        sort = context.get("sort")
        if sort:
            parts.append(f"sort {sort}")
        filter_count = context.get("filter_count", 0)
        if filter_count:
            parts.append(f"{filter_count} filter{'s' if filter_count != 1 else ''}")
        view_mode = context.get("view_mode")
        if view_mode:
            parts.append(view_mode)
        text = " " + " | ".join(p for p in parts if p)

    return text.ljust(width)[:width]
