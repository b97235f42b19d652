from resume_worker.extraction.markdown_normalizer import normalize_markdown


class TestNormalizeMarkdown:
    def test_rewrites_bullet_glyphs(self) -> None:
        text = "● Python\n• SQL\n◦ Docker\n* Kubernetes\n+ Go"
        assert normalize_markdown(text) == "- Python\n- SQL\n- Docker\n- Kubernetes\n- Go"

    def test_keeps_hyphenated_numbers(self) -> None:
        assert normalize_markdown("-5% latency") == "-5% latency"

    def test_fixes_heading_spacing(self) -> None:
        assert normalize_markdown("##Experience") == "## Experience"

    def test_keeps_hash_inside_heading(self) -> None:
        assert normalize_markdown("## C# and F#") == "## C# and F#"

    def test_collapses_inline_whitespace(self) -> None:
        assert normalize_markdown("Senior   Engineer\t\tAcme  ") == "Senior Engineer Acme"

    def test_at_most_one_blank_line_between_blocks(self) -> None:
        text = "Summary\n\n\n\n\nExperience\n \n\t\nSkills"
        assert normalize_markdown(text) == "Summary\n\nExperience\n\nSkills"

    def test_removes_invisible_characters(self) -> None:
        assert normalize_markdown("\ufeffJane\u200b Doe\u00ad") == "Jane Doe"

    def test_normalizes_line_endings(self) -> None:
        assert normalize_markdown("a\r\nb\rc") == "a\nb\nc"

    def test_is_idempotent(self) -> None:
        text = "#Jane Doe\n\n\n●  Python   developer\n\n## Skills ##\n* SQL"
        once = normalize_markdown(text)
        assert normalize_markdown(once) == once

    def test_empty_input(self) -> None:
        assert normalize_markdown("  \n\n \t ") == ""
