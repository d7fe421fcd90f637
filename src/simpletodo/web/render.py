# src/simpletodo/web/render.py

"""HTML rendering for todo records. Every user-supplied value goes through escape()."""

from __future__ import annotations

from html import escape

from ..todos.todo_models import Subtask, Todo

CREATED_FORMAT = "%d.%m.%Y %H:%M"

_STYLE = """
    :root { color-scheme: light; font-family: "Inter", system-ui, -apple-system, sans-serif; background: #f4f5f7; }
    body { margin: 0; padding: 32px; display: flex; justify-content: center; }
    .app { width: min(860px, 100%); background: #ffffff; border-radius: 16px;
           box-shadow: 0 24px 48px rgba(15, 23, 42, 0.08); padding: 28px; }
    h1 { margin: 0 0 16px 0; font-size: 28px; letter-spacing: -0.02em; }
    h2 { margin: 0 0 8px 0; }
    h3 { margin: 0 0 12px 0; }
    .subtitle { color: #64748b; margin-bottom: 12px; }
    form { display: flex; gap: 12px; align-items: flex-end; }
    form.stack { flex-direction: column; align-items: stretch; margin-bottom: 24px; }
    form.row { margin-bottom: 16px; }
    label { display: flex; flex-direction: column; gap: 6px; font-size: 13px; color: #475569; }
    input[type="text"], input[type="date"], textarea {
        width: 100%; padding: 12px 14px; border-radius: 10px; border: 1px solid #e2e8f0;
        font-size: 15px; font-family: inherit; }
    textarea { resize: vertical; }
    button, .button { border: none; border-radius: 10px; padding: 12px 16px; background: #111827;
        color: white; font-weight: 600; cursor: pointer; text-decoration: none; text-align: center; }
    .button.ghost { background: #e2e8f0; color: #0f172a; }
    .filters { display: flex; gap: 8px; margin-bottom: 16px; }
    .todo-list { display: grid; gap: 12px; }
    .todo, .detail { display: flex; flex-direction: column; gap: 16px; padding: 16px; border-radius: 12px;
        background: #f8fafc; border: 1px solid #e2e8f0; }
    .todo .meta { display: flex; flex-direction: column; gap: 6px; }
    .todo .title { font-weight: 600; font-size: 18px; }
    .description { color: #475569; }
    .deadline { font-size: 13px; color: #0f172a; }
    .time { font-size: 12px; color: #94a3b8; }
    .status { font-size: 12px; text-transform: uppercase; letter-spacing: 0.08em; color: #0f172a;
        background: #e2e8f0; padding: 4px 8px; border-radius: 999px; }
    .status.done { background: #dcfce7; color: #166534; }
    .actions { display: flex; gap: 8px; flex-wrap: wrap; }
    .actions button { background: #e2e8f0; color: #0f172a; padding: 8px 12px; }
    .actions button.delete { background: #fee2e2; color: #991b1b; }
    .progress { height: 8px; background: #e2e8f0; border-radius: 999px; overflow: hidden; }
    .progress-bar { height: 100%; background: #0ea5e9; }
    .progress-label { font-size: 12px; color: #475569; }
    .link { display: inline-block; margin-bottom: 16px; color: #0f172a; text-decoration: none; font-weight: 600; }
    .subtasks { display: flex; flex-direction: column; gap: 12px; }
    .subtask-list { display: grid; gap: 8px; }
    .subtask { padding: 10px 12px; border-radius: 10px; border: 1px solid #e2e8f0; background: #ffffff; }
    .subtask.done { background: #f0fdf4; }
    .checkbox { display: flex; flex-direction: row; align-items: center; gap: 8px; font-size: 14px; color: #0f172a; }
    .error { color: #991b1b; }
"""


def page(body: str, *, app_name: str = "simpletodo") -> str:
    name = escape(app_name)
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{name}</title>
  <style>{_STYLE}</style>
</head>
<body>
  <div class="app">
    <h1>{name}</h1>
    <div class="subtitle">A minimal todo tracker backed by SQLite.</div>
{body}
  </div>
</body>
</html>"""


def _progress(todo: Todo) -> str:
    pct = todo.progress_percent
    return (
        '<div class="progress">'
        f'<div class="progress-bar" style="width: {pct}%"></div>'
        "</div>"
        f'<div class="progress-label">{todo.subtask_done} / {todo.subtask_total} done ({pct}%)</div>'
    )


def add_todo_form() -> str:
    return """<form method="post" action="/add" class="stack">
  <label>Title<input type="text" name="title" placeholder="New todo" required /></label>
  <label>Description<textarea name="description" rows="2" placeholder="Optional"></textarea></label>
  <label>Deadline (day)<input type="date" name="deadline" /></label>
  <button type="submit">Add</button>
</form>"""


def filter_links(show: str) -> str:
    links = []
    for value, label in (("all", "All"), ("open", "Open only")):
        cls = "button" if value == show else "button ghost"
        links.append(f'<a class="{cls}" href="/?show={value}">{label}</a>')
    return f'<div class="filters">{"".join(links)}</div>'


def render_todo_card(todo: Todo) -> str:
    status_class = "status done" if todo.is_completed else "status"
    status_label = "Done" if todo.is_completed else "Open"
    description = (
        f'<div class="description">{escape(todo.description)}</div>' if todo.description else ""
    )
    deadline = f'<div class="deadline">Deadline: {escape(todo.deadline)}</div>' if todo.deadline else ""
    complete = ""
    if not todo.is_completed:
        complete = (
            '<form method="post" action="/complete">'
            f'<input type="hidden" name="id" value="{todo.id}" />'
            '<button type="submit">Done</button>'
            "</form>"
        )

    return f"""<div class="todo">
  <div class="meta">
    <div class="title">{escape(todo.title)}</div>
    {description}
    <div class="time">Created {todo.created_at.strftime(CREATED_FORMAT)}</div>
    {deadline}
    {_progress(todo)}
  </div>
  <div class="actions">
    <span class="{status_class}">{status_label}</span>
    <a class="button ghost" href="/todo/{todo.id}">Configure</a>
    {complete}
    <form method="post" action="/delete">
      <input type="hidden" name="id" value="{todo.id}" />
      <button class="delete" type="submit">Delete</button>
    </form>
  </div>
</div>"""


def render_index(todos: list[Todo], *, show: str = "all", app_name: str = "simpletodo") -> str:
    parts = [add_todo_form(), filter_links(show), '<div class="todo-list">']
    if not todos:
        parts.append('<div class="subtitle">No todos yet. Get started!</div>')
    else:
        parts.extend(render_todo_card(t) for t in todos)
    parts.append("</div>")
    return page("\n".join(parts), app_name=app_name)


def render_subtask(sub: Subtask) -> str:
    status = "done" if sub.is_done else "open"
    checked = "checked" if sub.is_done else ""
    return f"""<div class="subtask {status}">
  <form method="post" action="/toggle-subtask">
    <input type="hidden" name="id" value="{sub.id}" />
    <input type="hidden" name="todo_id" value="{sub.todo_id}" />
    <label class="checkbox">
      <input type="checkbox" onchange="this.form.submit()" {checked} />
      <span>{escape(sub.title)}</span>
    </label>
  </form>
</div>"""


def render_todo_detail(todo: Todo, *, app_name: str = "simpletodo") -> str:
    if todo.subtasks:
        subtasks = "\n".join(render_subtask(s) for s in todo.subtasks)
    else:
        subtasks = '<div class="subtitle">No subtasks yet.</div>'

    body = f"""<a class="link" href="/">&larr; Back</a>
<div class="detail">
  <div class="detail-header">
    <h2>{escape(todo.title)}</h2>
    {_progress(todo)}
  </div>
  <form method="post" action="/update" class="stack">
    <input type="hidden" name="id" value="{todo.id}" />
    <label>Description
      <textarea name="description" rows="3" placeholder="Description">{escape(todo.description or "")}</textarea>
    </label>
    <label>Deadline (day)
      <input type="date" name="deadline" value="{escape(todo.deadline or "")}" />
    </label>
    <button type="submit">Save</button>
  </form>
  <div class="subtasks">
    <h3>Subtasks</h3>
    <form method="post" action="/add-subtask" class="row">
      <input type="hidden" name="todo_id" value="{todo.id}" />
      <input type="text" name="title" placeholder="New subtask" required />
      <button type="submit">Add</button>
    </form>
    <div class="subtask-list">
{subtasks}
    </div>
  </div>
</div>"""
    return page(body, app_name=app_name)


def render_error(status_code: int, message: str, *, app_name: str = "simpletodo") -> str:
    body = (
        '<a class="link" href="/">&larr; Back</a>'
        f'<div class="error"><h2>{status_code}</h2><p>{escape(message)}</p></div>'
    )
    return page(body, app_name=app_name)
