"""
Tests for the recognition service (Wikipedia client mocked).
"""

import pytest

from cellar.models.enums import SearchLanguage
from cellar.services.candidate_ranker import SearchCandidate
from cellar.services.errors import InvalidInput, UpstreamUnavailable
from cellar.services.recognition import WineRecognitionService, validate_guesses

EN = SearchLanguage.EN
FR = SearchLanguage.FR


def _c(title, snippet, lang=EN):
    return SearchCandidate(title=title, snippet=snippet, source_language=lang)


def _service(client, **kwargs):
    return WineRecognitionService(client=client, languages=["en", "fr"], **kwargs)


class TestValidation:
    def test_blank_guesses_rejected(self):
        with pytest.raises(InvalidInput):
            validate_guesses("  ", "")

    def test_producer_or_name_enough(self):
        validate_guesses("Opus One", "")
        validate_guesses("", "Grange")

    @pytest.mark.asyncio
    async def test_recognize_rejects_blank_without_searching(self, make_wiki_client):
        client = make_wiki_client()
        with pytest.raises(InvalidInput):
            await _service(client).recognize("", " ", "2015")
        client.search.assert_not_called()


class TestRecognize:
    @pytest.mark.asyncio
    async def test_searches_every_language_and_pools(self, make_wiki_client):
        client = make_wiki_client(results_by_lang={
            EN: [_c("Leflaive", "A company.", EN)],
            FR: [_c("Domaine Leflaive", "Domaine viticole, vin de Bourgogne.", FR)],
        })
        result = await _service(client).recognize("Domaine Leflaive", "", "")

        assert client.search.await_count == 2
        queries = {call.args[1]: call.args[0] for call in client.search.await_args_list}
        assert queries[EN] == "Domaine Leflaive wine winery"
        assert queries[FR] == "Domaine Leflaive vin domaine"
        assert result.query_used == "Domaine Leflaive"
        assert [m.source.language for m in result.matches] == [FR, EN]

    @pytest.mark.asyncio
    async def test_inputs_trimmed_for_query(self, make_wiki_client):
        client = make_wiki_client()
        result = await _service(client).recognize("  Opus One ", "", " 2015 ")
        assert result.query_used == "Opus One 2015"

    @pytest.mark.asyncio
    async def test_one_language_failing_is_not_fatal(self, make_wiki_client):
        client = make_wiki_client(results_by_lang={
            EN: [_c("Opus One Winery", "A Napa wine estate.", EN)],
            FR: UpstreamUnavailable("Wikipedia (fr) timeout", "fr"),
        })
        result = await _service(client).recognize("Opus One", "", "")
        assert len(result.matches) == 1
        assert result.matches[0].source.title == "Opus One Winery"

    @pytest.mark.asyncio
    async def test_all_languages_failing_gives_fallback(self, make_wiki_client):
        client = make_wiki_client(results_by_lang={
            EN: UpstreamUnavailable("down", "en"),
            FR: UpstreamUnavailable("down", "fr"),
        })
        result = await _service(client).recognize("Opus One", "", "2015")
        assert len(result.matches) == 1
        fallback = result.matches[0]
        assert fallback.confidence == 60
        assert fallback.producer == "Opus One"
        assert fallback.name == "Unknown"
        assert fallback.vintage == 2015
        client.summary_thumbnail.assert_not_called()

    @pytest.mark.asyncio
    async def test_at_most_five_matches(self, make_wiki_client):
        client = make_wiki_client(results_by_lang={
            EN: [_c(f"Opus One {i}", "wine") for i in range(10)],
        })
        result = await _service(client).recognize("Opus One", "", "")
        assert len(result.matches) == 5
        # Only the top 8 candidates get an image lookup
        assert client.summary_thumbnail.await_count == 8

    @pytest.mark.asyncio
    async def test_timings_recorded(self, make_wiki_client):
        client = make_wiki_client(results_by_lang={EN: [_c("Opus One", "wine")]})
        result = await _service(client).recognize("Opus One", "", "")
        assert {"search_ms", "images_ms", "total_ms"} <= set(result.timings)


class TestImageEnrichment:
    @pytest.mark.asyncio
    async def test_summary_preferred_over_batch(self, make_wiki_client):
        client = make_wiki_client(
            results_by_lang={EN: [_c("Opus One", "wine"), _c("Opus One Winery", "wine")]},
            summaries={"Opus One": "https://img/summary.jpg"},
            page_images={EN: {
                "Opus One": "https://img/batch-1.jpg",
                "Opus One Winery": "https://img/batch-2.jpg",
            }},
        )
        result = await _service(client).recognize("Opus One", "", "")
        images = {m.source.title: m.image_url for m in result.matches}
        assert images == {
            "Opus One": "https://img/summary.jpg",
            "Opus One Winery": "https://img/batch-2.jpg",
        }

    @pytest.mark.asyncio
    async def test_batch_lookup_per_language(self, make_wiki_client):
        client = make_wiki_client(
            results_by_lang={EN: [_c("Opus One", "wine", EN)], FR: [_c("Opus One", "vin", FR)]},
            page_images={FR: {"Opus One": "https://img/fr.jpg"}},
        )
        result = await _service(client).recognize("Opus One", "", "")
        by_lang = {m.source.language: m.image_url for m in result.matches}
        assert by_lang == {EN: None, FR: "https://img/fr.jpg"}
        assert client.page_images.await_count == 2

    @pytest.mark.asyncio
    async def test_image_failures_leave_matches_without_image(self, make_wiki_client):
        client = make_wiki_client(
            results_by_lang={EN: [_c("Opus One", "wine")]},
            page_images={EN: UpstreamUnavailable("down", "en")},
        )
        client.summary_thumbnail.side_effect = UpstreamUnavailable("down", "en")
        result = await _service(client).recognize("Opus One", "", "")
        assert result.matches[0].image_url is None
        assert result.matches[0].confidence > 0

    @pytest.mark.asyncio
    async def test_enrichment_disabled(self, make_wiki_client):
        client = make_wiki_client(
            results_by_lang={EN: [_c("Opus One", "wine")]},
            summaries={"Opus One": "https://img/summary.jpg"},
        )
        result = await _service(client).recognize("Opus One", "", "", enrich_images=False)
        assert result.matches[0].image_url is None
        client.summary_thumbnail.assert_not_called()
        client.page_images.assert_not_called()
        assert "images_ms" not in result.timings

    @pytest.mark.asyncio
    async def test_service_default_can_disable_enrichment(self, make_wiki_client):
        client = make_wiki_client(results_by_lang={EN: [_c("Opus One", "wine")]})
        await _service(client, enrich_images=False).recognize("Opus One", "", "")
        client.summary_thumbnail.assert_not_called()
