from learn_app.core.markdown_math_renderer import MarkdownMathRenderer


def test_render_fragment_wraps_paragraph_and_keeps_math():
    html = MarkdownMathRenderer().render_fragment("Compute $\\Delta G$ for **this** reaction")
    assert html.startswith("<p>")
    assert "<strong>this</strong>" in html
    assert "$\\Delta G$" in html


def test_render_fragment_placeholder_for_empty_text():
    assert MarkdownMathRenderer().render_fragment("  ") == "<p><em>No question text.</em></p>"


def test_raw_html_is_escaped():
    html = MarkdownMathRenderer().render_fragment("<script>alert(1)</script>")
    assert "<script>" not in html


def test_render_options_are_inline():
    assert MarkdownMathRenderer().render_options(["*a*", "b"]) == ["<em>a</em>", "b"]
