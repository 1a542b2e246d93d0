from docsift.highlight.urls import highlight_param, highlight_terms, highlight_url


def test_highlight_url_moves_fragment_to_the_end() -> None:
    url = highlight_url("/docs/install#setup", ["install", "guide"])
    assert url == "/docs/install?highlight=install~guide#setup"


def test_highlight_url_without_fragment() -> None:
    assert highlight_url("/blog/post", ["post"]) == "/blog/post?highlight=post"


def test_highlight_url_percent_encodes_terms() -> None:
    url = highlight_url("/docs/a", ["a b", "x&y", "c~d"])
    assert url == "/docs/a?highlight=a%20b~x%26y~c~~d"
    assert highlight_terms(url) == ["a b", "x&y", "c~d"]


def test_highlight_param_absent_or_blank() -> None:
    assert highlight_param("/docs/install") is None
    assert highlight_param("/docs/install?highlight=") is None
    assert highlight_param("/docs/install?other=1") is None
    assert highlight_terms("/docs/install") == []


def test_highlight_terms_from_full_url_with_other_params() -> None:
    url = "https://example.com/docs/install?tab=cli&highlight=install~guide#setup"
    assert highlight_terms(url) == ["install", "guide"]
