from __future__ import annotations

from page_harvest.discovery import collect_image_urls, discover_candidates, parse_html


def test_duplicate_hrefs_keep_first_occurrence():
    soup = parse_html(
        """
        <a href="/post/1">A</a>
        <a href="/post/1">A-dup</a>
        <a href="/x"><img src="/thumb.jpg"></a>
        """
    )
    candidates = discover_candidates(soup)
    assert [(c.href, c.title, c.has_image) for c in candidates] == [
        ("/post/1", "A", False),
        ("/x", "Untitled", True),
    ]


def test_keywords_and_images_qualify_other_links_do_not():
    soup = parse_html(
        """
        <a href="/about">About</a>
        <a href="/blog/today">Today</a>
        <a href="https://news.example.com/article-42">Story</a>
        <a>No href</a>
        <a href="">Empty</a>
        <a href="/contact"><img alt="no source"></a>
        """
    )
    hrefs = [c.href for c in discover_candidates(soup)]
    assert hrefs == ["/blog/today", "https://news.example.com/article-42"]


def test_title_falls_back_to_image_alt():
    soup = parse_html('<a href="/gallery/7"><img src="/t.jpg" alt=" Sunset "></a>')
    (candidate,) = discover_candidates(soup)
    assert candidate.title == "Sunset"


def test_discovery_is_not_capped():
    links = "".join(f'<a href="/post/{i}">Post {i}</a>' for i in range(30))
    assert len(discover_candidates(parse_html(links))) == 30


def test_collect_image_urls_resolves_largest_and_skips_data_urls():
    soup = parse_html(
        """
        <img src="/a.jpg" srcset="/a-400.jpg 400w, /a-1600.jpg 1600w">
        <img src="data:image/png;base64,AAAA">
        <img alt="no source">
        <img src="https://cdn.example.com/b.png">
        <img src="c.jpg">
        """
    )
    urls = collect_image_urls(soup, "https://example.com/post/1/")
    assert urls == [
        "https://example.com/a-1600.jpg",
        "https://cdn.example.com/b.png",
        "https://example.com/post/1/c.jpg",
    ]


def test_title_joins_nested_text_with_spaces():
    soup = parse_html('<a href="/post/9">  Hello <b>World</b>\n <span>again</span> </a>')
    (candidate,) = discover_candidates(soup)
    assert candidate.title == "Hello World again"
