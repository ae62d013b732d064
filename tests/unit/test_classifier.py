from bs4 import BeautifulSoup

from folio.blocks import MediaBlock, StructuredBlock, TextBlock
from folio.classifier import extract_blocks

DOCUMENT = """
<article>
  <h1>Title</h1>
  <p>Intro with <b>bold</b> text.</p>
  <ul><li><p>nested paragraph</p></li><li>second</li></ul>
  <div class="callout"><p>Note this.</p></div>
  <p><img src="figure.png" alt="Figure 1" width="240px" height="120"></p>
  <table><tr><td>a</td><td>b</td></tr></table>
  <pre>code  block</pre>
  <blockquote>Quoted.</blockquote>
  <h2 data-actual-level="4">Deep</h2>
  <img src="loose.png">
</article>
"""


def test_blocks_follow_document_order_and_skip_nested_matches():
    blocks = extract_blocks(DOCUMENT)
    assert [block.kind for block in blocks] == [
        "h1", "p", "ul", "callout", "img", "table", "pre", "blockquote", "h2", "img",
    ]


def test_text_blocks_keep_inner_markup():
    blocks = extract_blocks(DOCUMENT)
    assert blocks[0] == TextBlock("h1", "Title")
    assert blocks[1].content == "Intro with <b>bold</b> text."
    assert blocks[8].level == 4


def test_structured_blocks_hold_markup_and_text():
    blocks = extract_blocks(DOCUMENT)
    callout = blocks[3]
    assert isinstance(callout, StructuredBlock)
    assert callout.text == "Note this."
    assert callout.html.startswith('<div class="callout">')
    assert blocks[5].text == "a b"


def test_image_only_paragraph_becomes_media():
    blocks = extract_blocks(DOCUMENT)
    assert blocks[4] == MediaBlock(src="figure.png", alt="Figure 1", width=240.0, height=120.0)
    assert blocks[9] == MediaBlock(src="loose.png")


def test_empty_elements_are_skipped_unless_asked():
    html = "<p>   </p><p>x</p><ul></ul>"
    assert [b.kind for b in extract_blocks(html)] == ["p"]
    assert [b.kind for b in extract_blocks(html, skip_empty=False)] == ["p", "p", "ul"]


def test_snapshots_are_independent_of_the_source_tree():
    soup = BeautifulSoup("<table><tr><td>before</td></tr></table>", "html.parser")
    (block,) = extract_blocks(soup)
    soup.find("td").string = "after"
    assert "before" in block.html
    assert block.text == "before"


def test_image_beside_text_stays_inline_in_the_paragraph():
    blocks = extract_blocks('<p>See the figure <img src="fig.png" alt="Fig" width="40"> here.</p>')
    assert [block.kind for block in blocks] == ["p"]
    assert "<img" in blocks[0].content
    assert blocks[0].content.startswith("See the figure ")
