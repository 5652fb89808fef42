from gigcheck.harvest import harvest, harvest_site, load_all_event_summaries
from gigcheck.selectors import WebsiteConfig, parse_selectors
from gigcheck.utils.events import identity_key

URL = "https://venue.test/events"


def quiet(message, level="INFO"):
    pass


def listing(rows, button=False, loader=False):
    """Render a listing page; rows are (name, date, href) tuples."""
    articles = "".join(
        f"""
        <article>
          <h2 class="title"><a href="{href}">{name}</a></h2>
          <time>{date}</time>
          <p>{name} brings the funk.</p>
        </article>
        """
        for name, date, href in rows
    )
    more = '<a class="load-more">Load more</a>' if button else ""
    spinner = '<div class="loading"></div>' if loader else ""
    return f"<html><body><main>{articles}</main>{more}{spinner}</body></html>"


def single_page_site(**extra):
    return WebsiteConfig(url=URL, selectors=parse_selectors({
        "event": "article", "name": ".title", "date": "time", **extra,
    }))


def two_page_site(**extra):
    return WebsiteConfig(url=URL, selectors=parse_selectors({
        "event": "article",
        "name": ".title",
        "date": "time",
        "detail_link": ".title a",
        "description": [{"domain": "venue.test", "description": ".about"}],
        **extra,
    }))


A = ("Foo Band", "May 1", "/events/1")
B = ("Bar Band", "May 2", "/events/2")
C = ("Baz Band", "May 3", "/events/3")


def test_single_page_rows_carry_description(web, sessions):
    web.pages[URL] = listing([A, B])

    result = harvest_site(sessions.session, single_page_site(), 1000, log_func=quiet)

    assert result["errors"] == []
    assert [e["name"] for e in result["events"]] == ["Foo Band", "Bar Band"]
    event = result["events"][0]
    assert event["date"] == "May 1"
    assert event["page"] == 0
    assert "brings the funk" in event["description"]
    assert "detail_link" not in event
    assert "relevance" not in event


def test_two_page_rows_carry_detail_link(web, sessions):
    web.pages[URL] = listing([A])

    result = harvest_site(sessions.session, two_page_site(), 1000, log_func=quiet)

    event = result["events"][0]
    assert event["detail_link"] == "/events/1"
    assert "description" not in event


def test_rerendered_listing_is_not_duplicated(web, sessions):
    web.pages[URL] = [
        listing([A, B], button=True),
        listing([A, B, C]),
    ]

    result = harvest_site(sessions.session, two_page_site(load_more_link=".load-more"), 1000, log_func=quiet)

    assert result["errors"] == []
    assert [e["name"] for e in result["events"]] == ["Foo Band", "Bar Band", "Baz Band"]
    assert all(e["page"] == 1 for e in result["events"])
    assert web.clicks == 1
    assert web.listing_reads == 2


def test_rows_sharing_name_and_date_are_all_kept(web, sessions):
    # No .title on either row, so both have a blank name on the same date
    web.pages[URL] = """
    <main>
      <article><time>May 1</time><p>Heavy metal matinee</p></article>
      <article><time>May 1</time><p>Late night soul revue</p></article>
    </main>
    """

    result = harvest_site(sessions.session, single_page_site(), 1000, log_func=quiet)

    assert len(result["events"]) == 2
    assert [e["name"] for e in result["events"]] == [None, None]
    assert "Late night soul revue" in result["events"][1]["description"]


def test_listing_rows_are_kept_as_read(web, sessions):
    web.pages[URL] = listing([A, A, B])

    result = harvest_site(sessions.session, two_page_site(), 1000, log_func=quiet)

    assert [e["name"] for e in result["events"]] == ["Foo Band", "Foo Band", "Bar Band"]


def test_each_pass_counts_rows_not_seen_before(web, sessions):
    web.pages[URL] = [listing([A, B], button=True), listing([A, B, C])]
    site = two_page_site(load_more_link=".load-more")
    messages = []

    with sessions.session.page() as page:
        page.goto(URL)
        result = harvest(
            page,
            site,
            1000,
            discovered_keys={identity_key({"name": "Foo Band", "date": "May 1"})},
            depth=2,
            max_depth=3,
            log_func=lambda message, level="INFO": messages.append(message),
        )

    assert messages == ["    page 3: 1 new of 2 events", "    page 4: 1 new of 3 events"]
    assert web.clicks == 1
    assert all(e["page"] == 3 for e in result["events"])


def test_endless_load_more_stops_at_max_depth(web, sessions):
    # The button never goes away and the loader always completes.
    web.pages[URL] = listing([A, B], button=True)
    site = single_page_site(load_more_link=".load-more", load_more_loader=".loading")

    with sessions.session.page() as page:
        page.goto(URL)
        result = harvest(page, site, 1000, max_depth=3, log_func=quiet)

    assert result["errors"] == []
    assert web.listing_reads == 4
    assert web.clicks == 3
    assert [e["name"] for e in result["events"]] == ["Foo Band", "Bar Band"]
    assert result["events"][0]["page"] == 3


def test_load_more_without_new_rows_records_timeout(web, sessions):
    web.pages[URL] = listing([A, B], button=True)
    site = single_page_site(load_more_link=".load-more")

    result = harvest_site(sessions.session, site, 1000, log_func=quiet)

    assert len(result["errors"]) == 1
    assert result["errors"][0].startswith("Error waiting for more events to load on")
    assert [e["name"] for e in result["events"]] == ["Foo Band", "Bar Band"]
    assert web.listing_reads == 1


def test_loader_that_never_shows_records_error(web, sessions):
    web.loader_shows = False
    web.pages[URL] = [listing([A], button=True), listing([A, B])]
    site = single_page_site(load_more_link=".load-more", load_more_loader=".loading")

    result = harvest_site(sessions.session, site, 1000, log_func=quiet)

    assert result["errors"][0].startswith("Error waiting for load more loader on")
    assert len(result["events"]) == 1


def test_hidden_or_transparent_button_ends_harvest(web, sessions):
    web.pages[URL] = [listing([A], button=True), listing([A, B])]
    site = single_page_site(load_more_link=".load-more")

    web.button_visible = False
    result = harvest_site(sessions.session, site, 1000, log_func=quiet)
    assert result["errors"] == []
    assert len(result["events"]) == 1
    assert web.clicks == 0

    web.button_visible = True
    web.button_opacity = 0
    result = harvest_site(sessions.session, site, 1000, log_func=quiet)
    assert result["errors"] == []
    assert web.clicks == 0


def test_missing_button_is_not_an_error(web, sessions):
    web.pages[URL] = listing([A])

    result = harvest_site(sessions.session, single_page_site(load_more_link=".load-more"), 1000, log_func=quiet)

    assert result["errors"] == []
    assert len(result["events"]) == 1


def test_missing_event_container_fails_site_and_closes_page(web, sessions):
    web.pages[URL] = "<html><body><p>Nothing booked</p></body></html>"

    result = harvest_site(sessions.session, single_page_site(), 1000, log_func=quiet)

    assert result["events"] == []
    assert len(result["errors"]) == 1
    assert URL in result["errors"][0]
    assert web.opened == web.closed == 1


def test_navigation_failure_fails_site(web, sessions):
    web.failing.add(URL)

    result = harvest_site(sessions.session, single_page_site(), 1000, log_func=quiet)

    assert result["events"] == []
    assert "Timed out loading" in result["errors"][0]
    assert web.opened == web.closed == 1


def test_load_all_event_summaries_records_metrics(web, sessions):
    other = "https://other.test/shows"
    web.pages[URL] = listing([A, B])
    web.failing.add(other)
    configs = [single_page_site(), WebsiteConfig(url=other, selectors=single_page_site().selectors)]

    sites, metrics = load_all_event_summaries(configs, sessions, 1000, log_func=quiet)

    assert [s["url"] for s in sites] == [URL, other]
    assert metrics[URL].event_count == 2
    assert metrics[URL].errors == 0
    assert metrics[other].errors == 1
    assert metrics[other].error_messages == sites[1]["errors"]
