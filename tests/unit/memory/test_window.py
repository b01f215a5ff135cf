"""Tests for the conversation context window and summaries."""

from __future__ import annotations

from hukukrag.memory.models import ConversationSummary
from hukukrag.memory.window import (
    BASE_SYSTEM_PROMPT,
    build_context,
    context_aware_system_prompt,
    format_messages_for_api,
    format_summary_for_context,
    generate_summary,
    needs_summarization,
    update_summary_if_needed,
)


def _fill(repo, conversation_id: str, n: int, content: str = "mesaj") -> None:
    for i in range(n):
        repo.add_message(conversation_id, "user" if i % 2 == 0 else "assistant", f"{content} {i}")


# ------------------------------------------------------------------
# build_context
# ------------------------------------------------------------------


def test_message_budget_keeps_latest_in_order(repo):
    _fill(repo, "c1", 15)
    window = build_context(repo.get("c1"))
    assert [m.content for m in window.messages] == [f"mesaj {i}" for i in range(5, 15)]
    assert window.summary is None


def test_token_budget(repo):
    for _ in range(5):
        repo.add_message("c1", "user", "a" * 400)  # 100 tokens each
    window = build_context(repo.get("c1"), max_tokens=250)
    assert len(window.messages) == 2
    assert window.token_count == 200


def test_summary_added_when_messages_were_dropped(repo):
    _fill(repo, "c1", 15)
    repo.update_summary("c1", ConversationSummary(main_topics=["İş Hukuku"], message_count=15))
    conversation = repo.get("c1")
    window = build_context(conversation)
    assert window.summary.startswith("[Önceki Konuşma Özeti]")
    assert "Konular: İş Hukuku" in window.summary
    assert len(window.messages) == 10
    without = build_context(conversation, include_summary=False)
    assert window.token_count > without.token_count


def test_no_summary_when_everything_fits(repo):
    _fill(repo, "c1", 3)
    repo.update_summary("c1", ConversationSummary(main_topics=["İş Hukuku"]))
    assert build_context(repo.get("c1")).summary is None


def test_summary_can_be_disabled(repo):
    _fill(repo, "c1", 15)
    repo.update_summary("c1", ConversationSummary(main_topics=["İş Hukuku"]))
    assert build_context(repo.get("c1"), include_summary=False).summary is None


def test_empty_conversation(repo):
    window = build_context(repo.get_or_create("c1"))
    assert window.messages == []
    assert window.token_count == 0


def test_format_summary_sections():
    text = format_summary_for_context(
        ConversationSummary(
            main_topics=["Aile Hukuku"],
            key_entities=["4721 sayılı"],
            conclusions=["Sonuç olarak velayet anneye verilir."],
        )
    )
    assert text.splitlines() == [
        "[Önceki Konuşma Özeti]",
        "Konular: Aile Hukuku",
        "Önemli Referanslar: 4721 sayılı",
        "Önceki Sonuçlar: Sonuç olarak velayet anneye verilir.",
    ]


# ------------------------------------------------------------------
# Summarisation policy
# ------------------------------------------------------------------


def test_needs_summarization_thresholds(repo):
    _fill(repo, "c1", 19)
    assert not needs_summarization(repo.get("c1"))
    _fill(repo, "c1", 1)
    assert needs_summarization(repo.get("c1"))


def test_resummarize_after_new_messages(repo):
    _fill(repo, "c1", 20)
    update_summary_if_needed(repo, "c1")
    _fill(repo, "c1", 9)
    assert not needs_summarization(repo.get("c1"))
    _fill(repo, "c1", 1)
    assert needs_summarization(repo.get("c1"))


def test_update_summary_if_needed(repo):
    _fill(repo, "c1", 20, content="kişisel veri")
    summary = update_summary_if_needed(repo, "c1")
    assert summary is not None
    assert summary.message_count == 20
    assert repo.get("c1").summary is summary
    assert update_summary_if_needed(repo, "c1") is None
    assert update_summary_if_needed(repo, "yok") is None


# ------------------------------------------------------------------
# generate_summary
# ------------------------------------------------------------------


def test_generate_summary_topics_entities_conclusions(repo):
    repo.add_message("c1", "user", "İşçinin tazminat hakkı nedir? 4857 sayılı İş Kanunu ne diyor?")
    repo.add_message("c1", "assistant", "Sonuç olarak kıdem tazminatı ödenmelidir. Ayrıntı yok")
    repo.add_message("c1", "user", "Özetle bunu mu söylüyorsunuz.")
    summary = generate_summary(repo.get("c1").messages)

    assert summary.main_topics == ["İş Hukuku", "Borçlar Hukuku"]
    assert summary.key_entities == ["4857 sayılı"]
    assert summary.conclusions == ["Sonuç olarak kıdem tazminatı ödenmelidir."]
    assert summary.message_count == 3


def test_generate_summary_caps(repo):
    for i in range(12):
        repo.add_message("c1", "user", f"madde {i + 1}")
    summary = generate_summary(repo.get("c1").messages)
    assert len(summary.key_entities) == 10
    assert summary.key_entities[0] == "madde 1"


def test_generate_summary_empty():
    summary = generate_summary([])
    assert summary.main_topics == []
    assert summary.key_entities == []
    assert summary.conclusions == []
    assert summary.message_count == 0


# ------------------------------------------------------------------
# Prompt helpers
# ------------------------------------------------------------------


def test_format_messages_for_api(repo):
    _fill(repo, "c1", 2)
    assert format_messages_for_api(repo.get("c1").messages) == [
        {"role": "user", "content": "mesaj 0"},
        {"role": "assistant", "content": "mesaj 1"},
    ]


def test_context_aware_system_prompt(repo):
    conversation = repo.get_or_create("c1")
    assert context_aware_system_prompt(conversation) == BASE_SYSTEM_PROMPT

    repo.update_summary("c1", ConversationSummary(main_topics=["Vergi Hukuku", "Ticaret Hukuku"]))
    prompt = context_aware_system_prompt(conversation)
    assert prompt.startswith(BASE_SYSTEM_PROMPT)
    assert "Vergi Hukuku, Ticaret Hukuku" in prompt
