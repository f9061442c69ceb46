"""Tests for front matter parsing and serialization. Pure logic, no I/O."""

from datetime import datetime, timedelta, timezone

import pytest

from corpus.services.errors import MalformedMetadata
from corpus.services.frontmatter import (
    dump_document,
    parse_document,
    parse_metadata,
    split_front_matter,
)

EASTERN = timezone(timedelta(hours=-4))

POST = """\
---
title: "You might not need DatabaseCleaner"
date: 2017-10-31T09:30:00-04:00
draft: false
categories: ["rails", "testing"]
tags: ["rspec", "database_cleaner"]
---

Use `use_transactional_fixtures`:

```ruby
config.use_transactional_fixtures = true
```
"""

TOML_POST = """\
+++
title = "Lint your factories"
date = 2017-11-02T08:00:00-04:00
tags = ["factory_girl"]
+++
Body.
"""


def test_parse_yaml_document():
    doc = parse_document(POST, identity="database-cleaner")

    assert doc.id == "database-cleaner"
    assert doc.title == "You might not need DatabaseCleaner"
    assert doc.date == datetime(2017, 10, 31, 9, 30, tzinfo=EASTERN)
    assert doc.draft is False
    assert doc.categories == ["rails", "testing"]
    assert doc.tags == ["rspec", "database_cleaner"]
    assert doc.metadata.showpagemeta is True


def test_body_is_kept_verbatim():
    doc = parse_document(POST)
    assert doc.body.startswith("\nUse `use_transactional_fixtures`:")
    assert "```ruby\nconfig.use_transactional_fixtures = true\n```\n" in doc.body


def test_parse_toml_document():
    doc = parse_document(TOML_POST)
    assert doc.title == "Lint your factories"
    assert doc.date == datetime(2017, 11, 2, 8, 0, tzinfo=EASTERN)
    assert doc.tags == ["factory_girl"]
    assert doc.body == "Body.\n"


def test_leading_bom_is_ignored():
    doc = parse_document("\ufeff" + POST)
    assert doc.title == "You might not need DatabaseCleaner"


def test_unknown_keys_are_preserved():
    text = "---\ntitle: About\ndate: 2017-10-30\nmenu: main\nweight: 3\n---\n"
    doc = parse_document(text)
    assert doc.metadata.extra == {"menu": "main", "weight": 3}


def test_showpagemeta_false():
    doc = parse_document("---\ntitle: About\ndate: 2017-10-30\nshowpagemeta: false\n---\n")
    assert doc.metadata.showpagemeta is False


def test_bare_date_is_midnight_utc():
    doc = parse_document("---\ntitle: About\ndate: 2017-10-30\n---\n")
    assert doc.date == datetime(2017, 10, 30, tzinfo=timezone.utc)


def test_quoted_iso_date_with_z():
    doc = parse_document('---\ntitle: About\ndate: "2017-10-30T12:00:00Z"\n---\n')
    assert doc.date == datetime(2017, 10, 30, 12, tzinfo=timezone.utc)


def test_duplicate_terms_are_dropped():
    text = "---\ntitle: T\ndate: 2017-10-30\ntags: [rspec, rails, rspec]\ncategories: testing\n---\n"
    doc = parse_document(text)
    assert doc.tags == ["rspec", "rails"]
    assert doc.categories == ["testing"]


def test_missing_title_raises():
    with pytest.raises(MalformedMetadata, match="title"):
        parse_document("---\ndate: 2017-10-30\n---\nBody\n")


def test_missing_date_raises():
    with pytest.raises(MalformedMetadata, match="date"):
        parse_document("---\ntitle: No date\n---\nBody\n")


def test_blank_title_raises():
    with pytest.raises(MalformedMetadata):
        parse_document('---\ntitle: "   "\ndate: 2017-10-30\n---\n')


def test_unparsable_date_raises():
    with pytest.raises(MalformedMetadata) as exc_info:
        parse_document("---\ntitle: T\ndate: last tuesday\n---\n")
    assert any(e.startswith("date") for e in exc_info.value.errors)


def test_wrong_shape_for_draft_raises():
    with pytest.raises(MalformedMetadata):
        parse_document("---\ntitle: T\ndate: 2017-10-30\ndraft: [1, 2]\n---\n")


def test_missing_block_raises():
    with pytest.raises(MalformedMetadata, match="no front matter"):
        parse_document("Just a body.\n")


def test_unterminated_block_raises():
    with pytest.raises(MalformedMetadata, match="never closed"):
        parse_document("---\ntitle: T\ndate: 2017-10-30\n")


def test_invalid_yaml_raises():
    with pytest.raises(MalformedMetadata, match="cannot be decoded"):
        split_front_matter("---\ntitle: [unclosed\n---\n")


def test_non_mapping_block_raises():
    with pytest.raises(MalformedMetadata, match="mapping"):
        split_front_matter("---\n- a\n- b\n---\n")


def test_error_names_the_source():
    with pytest.raises(MalformedMetadata) as exc_info:
        parse_document("---\ndate: 2017-10-30\n---\n", source_path="post/x.md")
    assert exc_info.value.source == "post/x.md"
    assert str(exc_info.value).startswith("post/x.md: ")


def test_parse_metadata_accepts_mapping():
    meta = parse_metadata({"title": "T", "date": "2017-10-30T10:00:00+02:00"})
    assert meta.date.utcoffset() == timedelta(hours=2)


def test_identity_derived_from_path():
    doc = parse_document(POST, source_path="content/post/Database Cleaner.md", root="content")
    assert doc.id == "post/database-cleaner"
    assert doc.source_path == "content/post/Database Cleaner.md"


def test_identity_from_explicit_slug():
    text = "---\ntitle: T\ndate: 2017-10-30\nslug: Custom Slug\n---\n"
    doc = parse_document(text, source_path="content/post/other.md", root="content")
    assert doc.id == "custom-slug"


def test_metadata_round_trip():
    text = (
        "---\ntitle: Lint your factories\ndate: 2017-11-02T08:00:00-04:00\n"
        "draft: true\ncategories: [rails]\ntags: [rspec, factory_girl]\n"
        "showpagemeta: false\nslug: lint\nweight: 2\n---\nBody\n"
    )
    doc = parse_document(text)
    again = parse_document(dump_document(doc))

    assert again.metadata == doc.metadata
    assert again.metadata.extra == {"weight": 2}
    assert again.body == doc.body
    assert again.id == doc.id


def test_round_trip_of_toml_document_as_yaml():
    doc = parse_document(TOML_POST)
    dumped = dump_document(doc)
    assert dumped.startswith("---\ntitle: Lint your factories\n")
    assert parse_document(dumped).metadata == doc.metadata


def test_toml_local_time_survives_round_trip():
    text = (
        '+++\ntitle = "T"\ndate = 2017-11-02T08:00:00-04:00\n'
        "publish_at = 09:30:00\n+++\nBody\n"
    )
    doc = parse_document(text)
    assert doc.metadata.extra == {"publish_at": "09:30:00"}

    again = parse_document(dump_document(doc))
    assert again.metadata == doc.metadata
    assert again.body == "Body\n"


def test_numeric_title_is_kept_as_text():
    doc = parse_document("---\ntitle: 1984\ndate: 2017-11-02\n---\n")
    assert doc.title == "1984"


def test_date_like_slug_is_kept_as_text():
    doc = parse_document("---\ntitle: T\ndate: 2017-11-02\nslug: 2017-11-02\n---\n")
    assert doc.metadata.slug == "2017-11-02"
    assert doc.id == "2017-11-02"


def test_numeric_date_is_rejected():
    with pytest.raises(MalformedMetadata) as exc_info:
        parse_document("---\ntitle: T\ndate: 1509456600\n---\n")
    assert any(e.startswith("date") for e in exc_info.value.errors)
