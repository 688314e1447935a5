import pytest

from minihttpd import response
from minihttpd.response import (
    fallback_500_response,
    get_file,
    get_mime_type,
    redirect,
    render_error_page,
    render_file_response,
    render_html_response,
    render_template,
)


def _split(raw: bytes):
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    return lines, body


@pytest.mark.parametrize(
    "path, expected",
    [
        ("index.html", "text/html"),
        ("style.css", "text/css"),
        ("app.js", "application/javascript"),
        ("favicon.ico", "image/x-icon"),
        ("logo.png", "image/png"),
        ("photo.jpg", "image/jpeg"),
        ("photo.jpeg", "image/jpeg"),
        ("README", "application/octet-stream"),
        ("archive.tar.gz", "application/octet-stream"),
        ("PAGE.HTML", "application/octet-stream"),
    ],
)
def test_get_mime_type(path, expected):
    assert get_mime_type(path) == expected


def test_get_file_reads_bytes(tmp_path):
    target = tmp_path / "data.bin"
    target.write_bytes(b"\x00\x01binary\xff")
    assert get_file(str(target)) == b"\x00\x01binary\xff"


def test_get_file_missing_raises(tmp_path):
    with pytest.raises(OSError):
        get_file(str(tmp_path / "missing.txt"))


def test_render_template_replaces_all(tmp_path):
    template = tmp_path / "t.html"
    template.write_text("<p>{{name}} and {{name}} in {{place}}</p>")
    result = render_template(str(template), {"{{name}}": "Ann", "{{place}}": "Rome"})
    assert result == "<p>Ann and Ann in Rome</p>"


def test_render_template_missing_raises(tmp_path):
    with pytest.raises(OSError):
        render_template(str(tmp_path / "nope.html"), {"{{x}}": "y"})


def test_render_html_response_layout():
    raw = render_html_response("<h1>hi</h1>", response.STATUS_200_OK)
    lines, body = _split(raw)
    assert lines[0] == "HTTP/1.1 200 OK"
    assert "Content-Type: text/html" in lines
    assert f"Content-Length: {len(body)}" in lines
    assert "Connection: close" in lines
    assert body == b"<h1>hi</h1>"


def test_render_html_response_counts_encoded_bytes():
    raw = render_html_response("é", response.STATUS_404_NOT_FOUND)
    lines, body = _split(raw)
    assert lines[0] == "HTTP/1.1 404 Not Found"
    assert body == "é".encode("utf-8")
    assert f"Content-Length: {len(body)}" in lines


def test_render_file_response_forbidden_assets(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    raw = render_file_response("assets/db/users.txt")
    assert raw == (
        b"HTTP/1.1 403 Forbidden\r\n"
        b"Content-Type: text/plain\r\n"
        b"Content-Length: 13\r\n"
        b"Connection: close\r\n"
        b"\r\n"
        b"403 Forbidden"
    )


def test_render_file_response_serves_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "public").mkdir()
    (tmp_path / "public" / "style.css").write_bytes(b"body { color: red; }")
    lines, body = _split(render_file_response("public/style.css"))
    assert lines[0] == "HTTP/1.1 200 OK"
    assert "Content-Type: text/css" in lines
    assert f"Content-Length: {len(body)}" in lines
    assert body == b"body { color: red; }"


def test_render_file_response_html_uses_404_template(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    templates = tmp_path / "public" / "templates"
    templates.mkdir(parents=True)
    (templates / "404.html").write_bytes(b"<h1>gone</h1>")
    lines, body = _split(render_file_response("public/missing.html"))
    assert lines[0] == "HTTP/1.1 404 Not Found"
    assert "Content-Type: text/html" in lines
    assert body == b"<h1>gone</h1>"


def test_render_file_response_plain_404(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    lines, body = _split(render_file_response("public/missing.png"))
    assert lines[0] == "HTTP/1.1 404 Not Found"
    assert "Content-Type: text/plain" in lines
    assert body == b"404 Not Found"
    assert f"Content-Length: {len(body)}" in lines


def test_render_file_response_html_without_404_template(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    lines, body = _split(render_file_response("public/missing.html"))
    assert "Content-Type: text/plain" in lines
    assert body == b"404 Not Found"


def test_fallback_500_response():
    lines, body = _split(fallback_500_response())
    assert lines[0] == "HTTP/1.1 500 Internal Server Error"
    assert "Content-Type: text/plain" in lines
    assert body == b"An unexpected error occurred. Please try again later.\r\n"
    assert f"Content-Length: {len(body)}" in lines


def test_render_error_page_uses_template(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    templates = tmp_path / "public" / "templates"
    templates.mkdir(parents=True)
    (templates / "500.html").write_text("<p>{{message}}</p>")
    lines, body = _split(render_error_page("disk full"))
    assert lines[0] == "HTTP/1.1 500 Internal Server Error"
    assert "Content-Type: text/html" in lines
    assert body == b"<p>disk full</p>"


def test_render_error_page_falls_back(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert render_error_page("anything") == fallback_500_response()


def test_redirect_plain():
    raw = redirect("login")
    assert raw == (
        b"HTTP/1.1 302 Found\r\n"
        b"Location: login\r\n"
        b"Content-Length: 0\r\n"
        b"Connection: close\r\n"
        b"\r\n"
    )


def test_redirect_clears_cookie():
    lines, body = _split(redirect("login", response.STATUS_302_FOUND, True, "token"))
    assert (
        "Set-Cookie: session=deleted; Max-Age=0; Path=/; HttpOnly; SameSite=Strict"
        in lines
    )
    assert body == b""


def test_redirect_sets_session_cookie():
    lines, _ = _split(redirect("home", response.STATUS_302_FOUND, False, "token"))
    assert lines[1] == "Location: home"
    assert (
        "Set-Cookie: session=token; Max-Age=3600; Path=/; HttpOnly; SameSite=Strict"
        in lines
    )


def test_redirect_empty_token_sets_no_cookie():
    raw = redirect("home", response.STATUS_302_FOUND, False, "")
    assert b"Set-Cookie" not in raw
    assert raw == redirect("home")