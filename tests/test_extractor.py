"""Tests for site-strategy dispatch and job posting extraction.

Mocking strategy:
- Pages are small hand-written HTML documents shaped like each board's markup.
- ``trafilatura.extract`` is patched in the readability-fallback tests so the
  result does not depend on trafilatura's heuristics.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from bs4 import BeautifulSoup

from ghosted.fetch.extractor import (
    GENERIC,
    NextDataStrategy,
    extract_job_posting,
    find_job_data,
    meta_content,
    render_job_data,
    select_strategy,
)
from ghosted.fetch.models import Extraction


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_LEVER_HTML = """\
<html>
<head><meta property="og:title" content="Acme - Senior Engineer"></head>
<body>
  <div class="posting-headline"><h2>Senior Engineer</h2></div>
  <div class="main-header-content">Acme</div>
  <div class="section-wrapper page-full-width">
    <div class="section"><h3>About the team</h3><p>We build <b>payments</b>.</p></div>
  </div>
</body>
</html>
"""

_GREENHOUSE_HTML = """\
<html>
<head>
  <meta property="og:title" content="Backend Engineer">
  <meta property="og:site_name" content="Greenhouse">
</head>
<body>
  <span class="company-name">Acme</span>
  <div id="content">
    <p>Own the ledger service.</p>
    <div id="application"><label>First Name</label><button>Submit Application</button></div>
  </div>
</body>
</html>
"""

_GENERIC_HTML = """\
<html>
<head>
  <title>Careers | Acme</title>
  <meta property="og:title" content="Data Engineer">
  <meta property="og:site_name" content="Acme">
  <meta property="og:description" content="Short summary.">
</head>
<body>
  <nav>Home | Jobs</nav>
  <div class="job-description">
    <h2>Responsibilities</h2>
    <p>Design pipelines.</p>
  </div>
</body>
</html>
"""


def _next_data_page(payload: object, og_title: str = "", og_description: str = "") -> str:
    head = ""
    if og_title:
        head += f'<meta property="og:title" content="{og_title}">'
    if og_description:
        head += f'<meta property="og:description" content="{og_description}">'
    body = json.dumps(payload) if not isinstance(payload, str) else payload
    return (
        f"<html><head>{head}</head><body><div id='root'></div>"
        f'<script id="__NEXT_DATA__" type="application/json">{body}</script>'
        "</body></html>"
    )


_MICROSOFT_HOST = "careers.microsoft.com"


# ---------------------------------------------------------------------------
# select_strategy
# ---------------------------------------------------------------------------

class TestSelectStrategy:
    @pytest.mark.parametrize(
        ("host", "expected"),
        [
            ("jobs.lever.co", "lever"),
            ("JOBS.LEVER.CO", "lever"),
            ("boards.greenhouse.io", "greenhouse"),
            ("job-boards.greenhouse.io", "greenhouse"),
            ("acme.wd5.myworkdayjobs.com", "workday"),
            ("acme.workday.com", "workday"),
            ("www.linkedin.com", "linkedin"),
            ("jobs.ashbyhq.com", "ashby"),
            ("careers.microsoft.com", "microsoft"),
            ("example.com", "generic"),
            ("", "generic"),
        ],
    )
    def test_dispatch(self, host: str, expected: str) -> None:
        assert select_strategy(host).name == expected

    def test_unknown_host_gets_generic_instance(self) -> None:
        assert select_strategy("careers.acme.com") is GENERIC


# ---------------------------------------------------------------------------
# meta_content
# ---------------------------------------------------------------------------

class TestMetaContent:
    def test_property_attribute(self) -> None:
        soup = BeautifulSoup('<meta property="og:title" content="Engineer">', "html.parser")
        assert meta_content(soup, "og:title") == "Engineer"

    def test_reversed_attribute_order(self) -> None:
        soup = BeautifulSoup('<meta content="Acme" property="og:site_name">', "html.parser")
        assert meta_content(soup, "og:site_name") == "Acme"

    def test_name_attribute(self) -> None:
        soup = BeautifulSoup('<meta name="og:description" content="Summary">', "html.parser")
        assert meta_content(soup, "og:description") == "Summary"

    def test_missing(self) -> None:
        soup = BeautifulSoup("<p>no meta</p>", "html.parser")
        assert meta_content(soup, "og:title") == ""


# ---------------------------------------------------------------------------
# Job boards
# ---------------------------------------------------------------------------

class TestBoardStrategies:
    def test_lever(self) -> None:
        result = extract_job_posting(_LEVER_HTML, "jobs.lever.co")
        assert result.position == "Senior Engineer"
        assert result.company == "Acme"
        assert "### About the team" in result.content
        assert "We build **payments**." in result.content

    def test_lever_drops_apply_section(self) -> None:
        html = (
            "<html><body><h2>Engineer</h2>"
            '<div class="section-wrapper page-full-width">'
            '<div class="section"><p>Desc</p></div>'
            '<div class="section last"><a class="postings-btn">APPLY FOR THIS JOB</a></div>'
            "</div></body></html>"
        )
        result = extract_job_posting(html, "jobs.lever.co")
        assert result.content == "Desc"
        assert "APPLY" not in result.content

    def test_lever_falls_back_to_open_graph(self) -> None:
        html = (
            '<html><head><meta property="og:title" content="Designer">'
            '<meta property="og:site_name" content="Acme"></head>'
            '<body><div class="content"><p>Draw things.</p></div></body></html>'
        )
        result = extract_job_posting(html, "jobs.lever.co")
        assert result.position == "Designer"
        assert result.company == "Acme"
        assert result.content == "Draw things."

    def test_greenhouse_drops_application_form(self) -> None:
        result = extract_job_posting(_GREENHOUSE_HTML, "boards.greenhouse.io")
        assert result.position == "Backend Engineer"
        assert result.company == "Acme"
        assert result.content == "Own the ledger service."
        assert "Submit Application" not in result.content

    def test_greenhouse_new_layout(self) -> None:
        html = (
            '<html><head><meta property="og:title" content="SRE">'
            '<meta property="og:site_name" content="Acme"></head>'
            '<body><div class="job__description"><p>Keep it up.</p></div></body></html>'
        )
        result = extract_job_posting(html, "job-boards.greenhouse.io")
        assert result.company == "Acme"
        assert result.content == "Keep it up."

    def test_workday(self) -> None:
        html = (
            '<html><head><meta property="og:title" content="Analyst">'
            '<meta property="og:site_name" content="Acme"></head><body>'
            '<div data-automation-id="jobPostingDescription"><p>Crunch numbers.</p></div>'
            "</body></html>"
        )
        result = extract_job_posting(html, "acme.wd5.myworkdayjobs.com")
        assert (result.company, result.position) == ("Acme", "Analyst")
        assert result.content == "Crunch numbers."

    def test_workday_client_rendered_uses_og_description(self) -> None:
        html = (
            '<html><head><meta property="og:title" content="Analyst">'
            '<meta property="og:description" content="Crunch numbers for us.">'
            '</head><body><div id="root"></div></body></html>'
        )
        result = extract_job_posting(html, "acme.wd5.myworkdayjobs.com")
        assert result.content == "Crunch numbers for us."

    def test_linkedin_company_from_embedded_json(self) -> None:
        html = (
            '<html><head><meta property="og:title" content="Acme hiring Engineer">'
            '<script>{"companyName":"Acme","jobId":1}</script></head>'
            '<body><div class="description__text"><p>Ship features.</p></div></body></html>'
        )
        result = extract_job_posting(html, "www.linkedin.com")
        assert result.company == "Acme"
        assert result.position == "Acme hiring Engineer"
        assert result.content == "Ship features."

    def test_linkedin_topcard(self) -> None:
        html = (
            '<html><body><a class="topcard__org-name-link" href="#"> Acme Inc </a>'
            '<div class="description__text">Ship features.</div></body></html>'
        )
        result = extract_job_posting(html, "www.linkedin.com")
        assert result.company == "Acme Inc"

    def test_ashby(self) -> None:
        html = (
            '<html><head><meta property="og:title" content="Founding Engineer">'
            '<meta property="og:site_name" content="Acme"></head><body>'
            '<div class="ashby-job-posting-description"><ul><li>Rust</li></ul></div>'
            "</body></html>"
        )
        result = extract_job_posting(html, "jobs.ashbyhq.com")
        assert (result.company, result.position) == ("Acme", "Founding Engineer")
        assert result.content == "- Rust"

    def test_board_page_with_nothing_yields_empty_fields(self) -> None:
        result = extract_job_posting("<html><body></body></html>", "jobs.lever.co")
        assert (result.content, result.company, result.position) == ("", "", "")


# ---------------------------------------------------------------------------
# Next.js preload JSON
# ---------------------------------------------------------------------------

class TestNextDataStrategy:
    def test_job_object(self) -> None:
        payload = {
            "props": {
                "pageProps": {
                    "job": {
                        "title": "Principal Engineer",
                        "description": "<p>Lead the platform.</p>",
                        "qualifications": ["10 years experience", "Distributed systems"],
                        "location": "Redmond, WA",
                        "employmentType": "Full-Time",
                    }
                }
            }
        }
        result = extract_job_posting(_next_data_page(payload), _MICROSOFT_HOST)
        assert result.company == "Microsoft"
        assert result.position == "Principal Engineer"
        assert result.content.startswith("Lead the platform.")
        assert "## Qualifications" in result.content
        assert "- 10 years experience\n- Distributed systems" in result.content
        assert "**Location:** Redmond, WA" in result.content
        assert "**Employment Type:** Full-Time" in result.content

    def test_ampersands_in_json_strings(self) -> None:
        payload = {
            "props": {"pageProps": {"job": {"title": "Q&A Lead", "description": "Support M&A work."}}}
        }
        result = extract_job_posting(_next_data_page(payload), _MICROSOFT_HOST)
        assert result.position == "Q&A Lead"
        assert result.content == "Support M&A work."

    def test_job_detail_key(self) -> None:
        payload = {"props": {"pageProps": {"jobDetail": {"jobTitle": "PM", "summary": "Plan."}}}}
        result = extract_job_posting(
            _next_data_page(payload, og_title="Ignored | Microsoft Careers"), _MICROSOFT_HOST
        )
        # "PM" is shorter than three characters
        assert result.position == ""
        assert result.content == "Plan."

    def test_og_title_fallback_strips_brand(self) -> None:
        html = _next_data_page(
            {"props": {"pageProps": {}}},
            og_title="Software Engineer | Microsoft Careers",
            og_description="Build Azure.",
        )
        result = extract_job_posting(html, _MICROSOFT_HOST)
        assert result.position == "Software Engineer"
        assert result.content == "Build Azure."
        assert result.company == "Microsoft"

    def test_numeric_title_rejected(self) -> None:
        payload = {"props": {"pageProps": {"job": {"title": "1970393556641191"}}}}
        result = extract_job_posting(_next_data_page(payload), _MICROSOFT_HOST)
        assert result.position == ""

    def test_invalid_json_falls_back_to_meta(self) -> None:
        html = _next_data_page(
            "{not json", og_title="Engineer II | Microsoft Careers", og_description="Summary."
        )
        result = extract_job_posting(html, _MICROSOFT_HOST)
        assert result.position == "Engineer II"
        assert result.content == "Summary."

    def test_numeric_company_replaced_by_brand(self) -> None:
        strategy = NextDataStrategy("acme", "Acme", ("careers.acme.com",))

        checked = strategy.validate(Extraction(company="12345", position="Engineer"))
        assert checked.company == "Acme"
        assert checked.position == "Engineer"


class TestFindJobData:
    def test_prefers_job_key(self) -> None:
        data = {"props": {"pageProps": {"job": {"title": "A"}, "data": {"title": "B"}}}}
        assert find_job_data(data) == {"title": "A"}

    def test_data_key(self) -> None:
        data = {"props": {"pageProps": {"data": {"title": "B"}}}}
        assert find_job_data(data) == {"title": "B"}

    def test_page_props_itself(self) -> None:
        data = {"props": {"pageProps": {"title": "C"}}}
        assert find_job_data(data) == {"title": "C"}

    @pytest.mark.parametrize("data", [None, [], {"props": []}, {"props": {"pageProps": "x"}}])
    def test_unexpected_shapes(self, data: object) -> None:
        assert find_job_data(data) is None


class TestRenderJobData:
    def test_string_section(self) -> None:
        content, position = render_job_data(
            {"title": "Engineer", "responsibilities": "Write code."}
        )
        assert position == "Engineer"
        assert content == "\n\n## Responsibilities\n\nWrite code."

    def test_empty_job(self) -> None:
        assert render_job_data({}) == ("", "")


# ---------------------------------------------------------------------------
# Generic fallback
# ---------------------------------------------------------------------------

class TestGenericStrategy:
    def test_open_graph_and_container(self) -> None:
        result = extract_job_posting(_GENERIC_HTML, "careers.acme.com")
        assert result.position == "Data Engineer"
        assert result.company == "Acme"
        assert result.content == "## Responsibilities\n\nDesign pipelines."
        assert "Home | Jobs" not in result.content

    def test_ampersand_in_company(self) -> None:
        html = (
            '<html><head><meta property="og:site_name" content="AT&amp;T">'
            '<meta property="og:title" content="R&amp;D Engineer"></head>'
            "<body><main>Network work.</main></body></html>"
        )
        result = extract_job_posting(html, "careers.att.com")
        assert result.company == "AT&T"
        assert result.position == "R&D Engineer"

    def test_title_tag_when_no_og_title(self) -> None:
        html = "<html><head><title> Platform Engineer </title></head><body><main>Hi there</main></body></html>"
        result = extract_job_posting(html, "example.com")
        assert result.position == "Platform Engineer"
        assert result.content == "Hi there"

    def test_og_description_before_readability(self) -> None:
        html = (
            '<html><head><meta property="og:description" content="Short summary.">'
            "</head><body><p>Body text</p></body></html>"
        )
        with patch("ghosted.fetch.extractor.trafilatura.extract") as mock_extract:
            result = extract_job_posting(html, "example.com")
        assert result.content == "Short summary."
        mock_extract.assert_not_called()

    def test_readability_fallback(self) -> None:
        html = "<html><body><div><p>Loose paragraph.</p></div></body></html>"
        with patch(
            "ghosted.fetch.extractor.trafilatura.extract", return_value="Readable body"
        ) as mock_extract:
            result = extract_job_posting(html, "example.com")
        assert result.content == "Readable body"
        mock_extract.assert_called_once()

    def test_readability_finds_nothing(self) -> None:
        with patch("ghosted.fetch.extractor.trafilatura.extract", return_value=None):
            result = extract_job_posting("<html><body></body></html>", "example.com")
        assert (result.content, result.company, result.position) == ("", "", "")

    def test_empty_container_is_skipped(self) -> None:
        html = (
            '<html><body><div class="job-description">   </div>'
            "<article><p>Real text</p></article></body></html>"
        )
        result = extract_job_posting(html, "example.com")
        assert result.content == "Real text"
