"""Unit tests for HTML reduction and URL helpers."""

from policycheck.utils import get_domain, get_hostname, html_to_text

HTML = """
<html>
  <head><title> Acme Terms </title><style>body { color: red; }</style></head>
  <body>
    <nav>Home | About</nav>
    <h1>Terms&nbsp;of Service</h1>
    <script>var tracking = true;</script>
    <p>Binding   individual arbitration applies.</p>
    <footer>Copyright</footer>
  </body>
</html>
"""


class TestHtmlToText:
    def test_title(self):
        title, _ = html_to_text(HTML)
        assert title == "Acme Terms"

    def test_visible_text_only(self):
        _, text = html_to_text(HTML)
        assert "tracking" not in text
        assert "color" not in text
        assert "Home" not in text
        assert "Copyright" not in text
        assert "Terms of Service" in text
        assert "Binding individual arbitration applies." in text

    def test_no_title(self):
        title, text = html_to_text("<p>Hello</p>")
        assert title == ""
        assert text == "Hello"


class TestUrlHelpers:
    def test_hostname(self):
        assert get_hostname("https://shop.example.com/terms") == "shop.example.com"

    def test_hostname_without_url(self):
        assert get_hostname(None) == "unknown"
        assert get_hostname("") == "unknown"

    def test_registered_domain(self):
        assert get_domain("https://policies.google.com/terms") == "google.com"
        assert get_domain("https://sub.example.co.uk:443/") == "example.co.uk"
