"""
Tests for entity extraction
"""

from src.agents.assistant.entities import extract_entities, extract_client_name, extract_time_range


class TestClientName:
    """Title-Case names near trigger phrases"""

    def test_possessive_name(self):
        assert extract_client_name("Show me Dylan Jackson's info") == "Dylan Jackson"

    def test_tell_me_about(self):
        assert extract_client_name("Tell me about Priya Patel") == "Priya Patel"

    def test_policies_for(self):
        assert extract_client_name("show policies for Marcus Chen") == "Marcus Chen"

    def test_email_to(self):
        assert extract_client_name("Draft an email to Elena Rossi about her renewal") == "Elena Rossi"

    def test_sentence_start_is_not_a_name(self):
        """Capitalized first word must not be glued onto the name"""
        entities = extract_entities("Show me Dylan Jackson's portfolio")
        assert entities.client_name == "Dylan Jackson"

    def test_lowercase_name_is_not_found(self):
        assert extract_client_name("tell me about dylan jackson") is None

    def test_stop_words_are_not_names(self):
        assert extract_client_name("What do I have for Today") is None


class TestIdsAndNumbers:
    """Explicit record ids and policy numbers"""

    def test_record_ids(self):
        entities = extract_entities("Link T002 to C001 and POL003")
        assert entities.task_id == "T002"
        assert entities.client_id == "C001"
        assert entities.policy_id == "POL003"

    def test_policy_number(self):
        assert extract_entities("Show policy LI-2023-001").policy_number == "LI-2023-001"

    def test_bare_policy_number(self):
        assert extract_entities("What is the premium on HO-2022-002?").policy_number == "HO-2022-002"


class TestTimeRange:
    """Keyword time ranges in priority order overdue > week > month > today"""

    def test_overdue_beats_week(self):
        assert extract_time_range("overdue tasks this week") == "overdue"

    def test_week_beats_today(self):
        assert extract_time_range("anything due today or this week") == "week"

    def test_month(self):
        assert extract_time_range("tasks this month") == "month"

    def test_today(self):
        assert extract_time_range("what's due today") == "today"

    def test_none(self):
        assert extract_time_range("show my clients") is None


class TestOtherFields:
    """Task titles, policy type and status, search queries"""

    def test_task_title_from_status_question(self):
        assert extract_entities("What's the status of the portfolio review task?").task_title == "portfolio review"

    def test_task_title_called(self):
        assert extract_entities("find the task called KYC refresh").task_title == "KYC refresh"

    def test_policy_type_and_status(self):
        entities = extract_entities("show me active life insurance policies")
        assert entities.policy_type == "Life Insurance"
        assert entities.policy_status is None  # "active life" is not "active polic..."

        entities = extract_entities("list pending policies")
        assert entities.policy_status == "Pending"

    def test_search_query(self):
        assert extract_entities("search for retirement").search_query == "retirement"
        assert extract_entities("find clients named Chen").search_query == "Chen"

    def test_fields_are_independent(self):
        entities = extract_entities("Email Dylan Jackson's details about policy LI-2023-001 today")
        assert entities.client_name == "Dylan Jackson"
        assert entities.policy_number == "LI-2023-001"
        assert entities.time_range == "today"

    def test_empty_message(self):
        entities = extract_entities("")
        assert entities.model_dump(exclude_none=True) == {}
