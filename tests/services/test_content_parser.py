from datetime import datetime, timezone

from app.services.content_parser import ContentParser, parse_date, plain_text
from tests.conftest import make_doc


def test_to_summary_keeps_only_listing_fields():
    parser = ContentParser()

    summary = parser.to_summary(make_doc("como-utilizar-hooks", title="Como utilizar Hooks"))

    assert summary.uid == "como-utilizar-hooks"
    assert summary.title == "Como utilizar Hooks"
    assert summary.first_publication_date == datetime(
        2021, 3, 25, 19, 25, 28, tzinfo=timezone.utc
    )
    assert summary.published_label == "25 mar 2021"
    assert not hasattr(summary, "banner_url")


def test_to_detail_maps_sections_and_computed_fields():
    doc = make_doc(
        "post",
        content=[
            {
                "heading": "Proin et varius",
                "body": [
                    {"type": "paragraph", "text": "Lorem ipsum", "spans": []},
                    {"type": "list-item", "text": "Nullam", "spans": [{"type": "strong"}]},
                ],
            }
        ],
    )

    detail = ContentParser().to_detail(doc, reading_time=3)

    assert detail.banner_url == "https://images.example.com/post.png"
    assert detail.reading_time == 3
    assert detail.content[0].heading == "Proin et varius"
    assert [b.type for b in detail.content[0].body] == ["paragraph", "list-item"]
    assert detail.content[0].body[1].spans == [{"type": "strong"}]
    # 14:05 UTC is 11:05 in São Paulo
    assert detail.edited_label == "* editado em 26 mar 2021, às 11:05"


def test_get_sections_tolerates_missing_content():
    doc = make_doc("empty")
    doc["data"]["content"] = None

    assert ContentParser().get_sections(doc) == []


def test_rich_text_block_keeps_extra_keys():
    doc = make_doc(
        "img",
        content=[{"heading": "h", "body": [{"type": "image", "text": "", "url": "x.png"}]}],
    )

    block = ContentParser().get_sections(doc)[0].body[0]

    assert block.model_extra == {"url": "x.png"}


def test_parse_date_variants():
    assert parse_date(None) is None
    assert parse_date("") is None
    assert parse_date("2021-03-25T19:25:28+0000").tzinfo is not None
    assert parse_date("2021-03-25T19:25:28+00:00").hour == 19
    assert parse_date("2021-03-25").day == 25
    assert parse_date("2021-03-25T19:25:28Z").utcoffset().total_seconds() == 0
    assert parse_date("not a date") is None


def test_plain_text_flattens_rich_text():
    assert plain_text(None) == ""
    assert plain_text("Title") == "Title"
    assert plain_text([{"type": "heading1", "text": "Rich"}, {"text": "Title"}]) == "Rich Title"
