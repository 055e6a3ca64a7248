from projectide.file_parser import parse_ai_response, strip_fences


def _fixed_clock():
    return 1700000000000


BLOCK_A = (
    "projectName: demo\n"
    "filename: a.ts\n"
    "version: 1.0.0\n"
    "```ts\n"
    "const x = 1;\n"
    "```\n"
    "end of file: a.ts"
)

BLOCK_B = (
    "projectName: demo\n"
    "filename: src/b.css\n"
    "version: 2.1.0\n"
    "```css\n"
    "body { margin: 0; }\n"
    "```\n"
    "end of file: src/b.css"
)


def test_single_block_strips_fences():
    files = parse_ai_response(BLOCK_A + "\n")

    assert len(files) == 1
    f = files[0]
    assert f.project_name == "demo"
    assert f.file_name == "a.ts"
    assert f.version == "1.0.0"
    assert f.content == "const x = 1;"


def test_back_to_back_blocks_keep_source_order():
    files = parse_ai_response(BLOCK_B + "\n" + BLOCK_A)

    assert [f.file_name for f in files] == ["src/b.css", "a.ts"]
    assert files[0].content == "body { margin: 0; }"
    assert files[1].content == "const x = 1;"


def test_prose_around_blocks_is_ignored():
    text = "Here you go:\n\n" + BLOCK_A + " -- done, enjoy!\nmore chatter\n" + BLOCK_B
    files = parse_ai_response(text)

    assert [f.file_name for f in files] == ["a.ts", "src/b.css"]


def test_field_values_are_trimmed():
    text = (
        "projectName:    demo   \n"
        "filename:\ta.ts \n"
        "version:  1.0.3  \n"
        "print('hi')\n"
        "end of file: a.ts"
    )
    files = parse_ai_response(text)

    assert len(files) == 1
    assert files[0].key == ("demo", "a.ts", "1.0.3")
    assert files[0].content == "print('hi')"


def test_unfenced_body_is_kept():
    text = (
        "projectName: demo\n"
        "filename: notes.md\n"
        "version: 1.0.0\n"
        "\n"
        "# Notes\n"
        "\n"
        "- one\n"
        "end of file: notes.md\n"
    )
    files = parse_ai_response(text)

    assert files[0].content == "# Notes\n\n- one"


def test_block_with_empty_body_falls_back():
    text = (
        "projectName: demo\n"
        "filename: a.ts\n"
        "version: 1.0.0\n"
        "```ts\n"
        "```\n"
        "end of file: a.ts"
    )
    files = parse_ai_response(text, clock=_fixed_clock)

    assert len(files) == 1
    assert files[0].project_name == "default-project"
    assert files[0].content == text


def test_block_missing_version_is_dropped_when_another_block_matches():
    partial = (
        "projectName: demo\n"
        "filename: broken.ts\n"
        "let y = 2;\n"
        "end of file: broken.ts\n"
    )
    files = parse_ai_response(partial + BLOCK_A)

    assert len(files) == 1
    assert files[0].file_name == "a.ts"


def test_lone_partial_block_triggers_fallback_with_whole_reply():
    partial = (
        "projectName: demo\n"
        "filename: broken.ts\n"
        "let y = 2;\n"
        "end of file: broken.ts\n"
    )
    files = parse_ai_response(partial, clock=_fixed_clock)

    assert len(files) == 1
    assert files[0].project_name == "default-project"
    assert files[0].file_name == "response-1700000000000.txt"
    assert files[0].content == partial.strip()


def test_fallback_for_plain_prose():
    files = parse_ai_response("  just some prose, no markers \n", clock=_fixed_clock)

    assert len(files) == 1
    f = files[0]
    assert f.project_name == "default-project"
    assert f.version == "1.0.0"
    assert f.file_name == "response-1700000000000.txt"
    assert f.content == "just some prose, no markers"


def test_fallback_names_differ_between_calls():
    first = parse_ai_response("hello")
    second = parse_ai_response("hello")

    assert first[0].file_name != second[0].file_name


def test_fallback_not_added_when_a_block_matched():
    files = parse_ai_response("Intro text\n" + BLOCK_A + "\nOutro text")

    assert len(files) == 1
    assert files[0].project_name == "demo"


def test_empty_and_blank_input_yield_nothing():
    assert parse_ai_response("") == []
    assert parse_ai_response("   \n\t  ") == []


def test_same_input_gives_same_output():
    text = BLOCK_A + "\n" + BLOCK_B
    assert parse_ai_response(text) == parse_ai_response(text)


def test_marker_inside_fenced_body_splits_block():
    # The scan is not fence aware; the inner block wins its own record.
    text = (
        "projectName: demo\n"
        "filename: gen.py\n"
        "version: 1.0.0\n"
        "```python\n"
        "TEMPLATE = '''\n"
        "end of file: inner\n"
        "projectName: inner\n"
        "filename: inner.txt\n"
        "version: 0.1\n"
        "hello\n"
        "end of file: inner.txt\n"
        "'''\n"
        "```\n"
        "end of file: gen.py"
    )
    files = parse_ai_response(text)

    assert [f.file_name for f in files] == ["gen.py", "inner.txt"]
    assert files[0].content == "TEMPLATE = '''"


def test_strip_fences():
    assert strip_fences("```js\nx()\n```") == "x()"
    assert strip_fences("  x()  ") == "x()"
    assert strip_fences("```\nx()") == "x()"
    assert strip_fences("x()\n```") == "x()"
