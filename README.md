# minihttpd

A small HTTP server for simple sites. It has a router and helpers that build
whole HTTP responses as bytes. It also has plain-text stores for users and
login sessions. It uses only the standard library.

## Modules

### `minihttpd.httpd`

- `parse_request(data)` turns raw request bytes into a `Request`. It raises
  `ValueError` when there is no usable request line. A `Request` has these
  fields:
  - `method`
  - `uri`: the path before `?`
  - `query`: the part after `?`
  - `protocol`
  - `headers`: at most 16 `(name, value)` pairs
  - `payload`: the body, cut to `Content-Length` when that header is present

  `Request.header(name)` returns the first header with exactly that name, or
  `None`.
- `Router` registers handlers with decorators. Each handler takes a `Request`
  and returns the response bytes.
  - `route(method, uri)` matches one method and one exact URI.
  - `get(uri)` and `post(uri)` are shorthands for `route` with GET and POST.
  - `get_prefix(prefix)` matches any GET whose URI starts with the prefix.

  `Router.dispatch(request)` runs the first route that matches, trying routes
  in the order they were added. If no route matches, it returns
  `HTTP/1.1 500 Not Handled`.
- `handle_connection(conn, router)` reads one request from a socket (up to
  65535 bytes), sends the routed response and closes the socket.
- `serve_forever(port, router)` listens on all interfaces on the given port.
  It handles each connection in its own daemon thread and never returns.

### `minihttpd.response`

- `get_mime_type(path)` picks a content type from the file extension:
  - `.html` gives `text/html`
  - `.css` gives `text/css`
  - `.js` gives `application/javascript`
  - `.ico` gives `image/x-icon`
  - `.png` gives `image/png`
  - `.jpg` and `.jpeg` give `image/jpeg`
  - anything else gives `application/octet-stream`
- `get_file(path)` reads a file as bytes. It raises `OSError` on failure.
- `render_template(filepath, replacements)` loads a template and replaces
  every occurrence of each key of the `replacements` mapping with its value.
- `render_html_response(html, status="HTTP/1.1 200 OK")` wraps a body in
  complete response bytes.
- `render_file_response(filepath)` serves a file with these rules:
  - Paths starting with `assets` get `403 Forbidden`.
  - A missing `.html` file gets the 404 template, if that template exists.
  - Any other missing file gets a plain `404 Not Found`.
- `redirect(location, status=..., clear_cookie=False, session_token=None)`
  builds a header-only 302 reply. It can set the `session` cookie for one
  hour, or clear it.
- `render_error_page(message)` fills `{{message}}` in the 500 template.
  `fallback_500_response()` is the plain-text reply used when that template
  cannot be read.

### `minihttpd.session`

- `generate_token()` returns a random 64-character hex token.
- `extract_session_token(cookie_header)` returns the `session` value from a
  `Cookie` header. It returns `None` if the header is missing, or if the
  value is empty or too long.
- `SessionStore(path="assets/db/sessions.txt")` stores `token:username`
  lines. It has these methods:
  - `store(token, username)`
  - `check(token)`
  - `username_for(token)`

### `minihttpd.user`

- `UserStore(path="assets/db/users.txt")` keeps
  `username:password:description` lines. Passwords are stored as given, not
  hashed. It has these methods:
  - `add_user(username, password)`. New users get the description
    `no description`. It raises `InvalidUserInputError` for an empty
    username or password, and `UserExistsError` for a name that is already
    taken.
  - `exists(username)`
  - `check_password(username, password)`
  - `get_description(username)`
  - `set_description(username, new_desc)`. It rewrites the file through a
    temporary copy.
- `parse_user_line(line)` splits one stored line. It returns `None` if any
  part is missing.

## File layout

The default paths are relative to the working directory:

| Path | Used for |
| --- | --- |
| `public/templates/404.html` | the page for a missing HTML file |
| `public/templates/500.html` | the error page, which uses `{{message}}` |
| `assets/db/users.txt` | stored users |
| `assets/db/sessions.txt` | stored sessions |

`minihttpd.response` also defines `HOME_PAGE` (`public/templates/index.html`)
and `LOGIN_PAGE` (`public/templates/login.html`) for your own handlers.

## Example

```python
from minihttpd.httpd import Router, serve_forever
from minihttpd.response import render_file_response, redirect

router = Router()

@router.get("/logout")
def logout(request):
    return redirect("login", clear_cookie=True)

@router.get_prefix("/public/")
def public(request):
    return render_file_response(request.uri[1:])

serve_forever(8080, router)
```

## What it does not do

The package has no command-line program. You start the server from your own
code with `serve_forever`.

It comes with no ready-made site. There are no built-in handlers for home,
login or logout pages, no sign-up flow, and no template files. You write
those handlers with `Router` and the response, session and user helpers.