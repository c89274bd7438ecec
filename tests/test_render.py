from rich.console import Console

from optachat_client.formatter import format_message, format_text
from optachat_client.models import ConversationMessage
from optachat_client.render import to_html, to_rich


def render_plain(renderable):
    console = Console(record=True, width=80, color_system=None)
    console.print(renderable)
    return console.export_text()


def test_html_escapes_plain_text():
    html = to_html(format_text("<script>alert(1)</script> **<b>**"))
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "&lt;b&gt;</strong>" in html


def test_html_styles():
    html = to_html(format_text("• item\n2. step *soft*"))
    assert html.startswith("<p")
    assert "•</span>" in html
    assert "2.</span>" in html
    assert "<br>" in html
    assert "<em" in html and "soft</em>" in html


def test_html_code_block_is_escaped():
    html = to_html(format_text("```html\n<div>x</div>\n```"))
    assert 'data-language="html"' in html
    assert "&lt;div&gt;x&lt;/div&gt;" in html


def test_html_image_attribute_is_escaped():
    message = ConversationMessage(role="assistant", kind="image", image_ref='x.png" onerror="x')
    html = to_html(format_message(message))
    assert 'src="x.png&quot; onerror=&quot;x"' in html


def test_rich_output_contains_text_and_code():
    segments = format_text("Intro with **bold**\n\n```python\nprint('hi')\n```\n• done")
    output = render_plain(to_rich(segments))
    assert "Intro with bold" in output
    assert "print('hi')" in output
    assert "python" in output
    assert "• done" in output


def test_rich_does_not_parse_console_markup():
    output = render_plain(to_rich(format_text("[red]not markup[/red]")))
    assert "[red]not markup[/red]" in output


def test_rich_image_reference():
    message = ConversationMessage(role="assistant", kind="image", image_ref="cat.png", text="A cat")
    output = render_plain(to_rich(format_message(message)))
    assert "[image: cat.png]" in output
    assert "A cat" in output


def test_rich_code_language_is_not_markup():
    output = render_plain(to_rich(format_text("```[/x]\nprint(1)\n```")))
    assert "[/x]" in output
    assert "print(1)" in output

    output = render_plain(to_rich(format_text("```[bold]\nx = 1\n```")))
    assert "[bold]" in output
