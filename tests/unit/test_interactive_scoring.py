"""
Unit tests for the interactive question scorers.

Tests ordering, slider, image label, multi-step and short answer scoring,
including the broken content shapes each one must report.
"""

import pytest

from learnflow import score_question_answer


class TestOrderingScorer:
    """Test sequence ordering."""

    @pytest.fixture
    def question(self):
        return {"id": "q-ord", "type": "ordering", "options": ["a", "b", "c"], "answer": "[2, 0, 1]"}

    def test_index_order_resolves_to_values(self, question):
        result = score_question_answer(question, ["c", "a", "b"])
        assert result.ok
        assert result.is_correct
        assert result.correct_answer == ["c", "a", "b"]

    def test_json_encoded_submission_is_normalized(self, question):
        assert score_question_answer(question, '["C", " a ", "b"]').is_correct

    def test_wrong_order(self, question):
        result = score_question_answer(question, ["a", "b", "c"])
        assert result.ok
        assert not result.is_correct

    @pytest.mark.parametrize("submission", [["a", "c", "b"], ["c", "b", "a"], ["b", "a", "c"]])
    def test_transpositions_are_incorrect(self, question, submission):
        assert not score_question_answer(question, submission).is_correct

    def test_length_mismatch(self, question):
        assert not score_question_answer(question, ["c", "a"]).is_correct

    def test_unparseable_submission_is_incorrect(self, question):
        result = score_question_answer(question, "c, a, b")
        assert result.ok
        assert not result.is_correct

    def test_value_order(self, question):
        question["answer"] = '["c", "a", "b"]'
        assert score_question_answer(question, ["c", "a", "b"]).is_correct

    def test_too_few_options(self, question):
        question["options"] = ["a"]
        result = score_question_answer(question, ["a"])
        assert not result.ok
        assert result.reason == "options_missing"

    @pytest.mark.parametrize("answer", ["nope", "[]", None])
    def test_invalid_correct_order(self, question, answer):
        question["answer"] = answer
        result = score_question_answer(question, ["a"])
        assert not result.ok
        assert result.reason == "correct_order_invalid"

    def test_correct_index_out_of_range(self, question):
        question["answer"] = [0, 5]
        result = score_question_answer(question, ["a", "b"])
        assert not result.ok
        assert result.reason == "correct_index_out_of_range"


class TestSliderScorer:
    """Test numeric slider tolerance."""

    def test_within_step_tolerance(self, sample_slider):
        # max(step/2 = 0.25, explicit 0.2, 2% of range = 0.2)
        result = score_question_answer(sample_slider, 7.2)
        assert result.is_correct
        assert result.details == {"tolerance": 0.25, "unit": "pH"}
        assert result.correct_answer == 7.0

    def test_outside_tolerance(self, sample_slider):
        result = score_question_answer(sample_slider, 7.3)
        assert result.ok
        assert not result.is_correct

    def test_tolerance_boundary_is_inclusive(self):
        question = {
            "type": "slider",
            "options": '{"min": 0, "max": 10, "step": 0.1}',
            "answer": 6.6,
            "sourceMeta": {"slider": {"tolerance": 0.2}},
        }
        assert score_question_answer(question, 6.6).is_correct
        assert score_question_answer(question, 6.8).is_correct
        assert score_question_answer(question, "6.4").is_correct
        assert not score_question_answer(question, 6.81).is_correct
        assert not score_question_answer(question, 6.39).is_correct

    def test_default_range_when_options_missing(self):
        # Defaults 0..100 step 1: tolerance max(0.5, 2)
        question = {"type": "slider", "answer": "50"}
        assert score_question_answer(question, "51.5").is_correct
        assert not score_question_answer(question, 53).is_correct

    def test_invalid_step_falls_back(self):
        question = {"type": "slider", "options": [0, 10, 0], "answer": 5}
        assert score_question_answer(question, 5.5).is_correct
        assert not score_question_answer(question, 5.6).is_correct

    def test_slider_tolerance_meta_key(self):
        question = {
            "type": "slider",
            "options": [0, 100, 1],
            "answer": 40,
            "source_meta": '{"sliderTolerance": 3}',
        }
        assert score_question_answer(question, 43).is_correct
        assert not score_question_answer(question, 43.5).is_correct

    @pytest.mark.parametrize("submission", ["abc", None, True, "NaN", float("inf")])
    def test_non_numeric_submission(self, sample_slider, submission):
        result = score_question_answer(sample_slider, submission)
        assert result.ok
        assert not result.is_correct

    def test_non_numeric_stored_answer(self, sample_slider):
        sample_slider["answer"] = "about seven"
        result = score_question_answer(sample_slider, 7)
        assert result.ok
        assert not result.is_correct
        assert result.correct_answer is None


class TestImageLabelScorer:
    """Test target-to-label mappings."""

    @pytest.fixture
    def question(self):
        return {
            "type": "image_label",
            "answer": '{"t1": "Nucleus", "t2": "Membrane"}',
            "assets": {"image": "cell.png"},
        }

    def test_all_targets_match(self, question):
        result = score_question_answer(question, {"t1": "nucleus", "t2": "MEMBRANE"})
        assert result.is_correct
        assert result.correct_answer == {"t1": "Nucleus", "t2": "Membrane"}

    @pytest.mark.parametrize("target", ["t1", "t2"])
    def test_single_changed_label(self, question, target):
        submission = {"t2": "Membrane", "t1": "Nucleus"}
        submission[target] = "Golgi"
        assert not score_question_answer(question, submission).is_correct

    def test_extra_targets_are_ignored(self, question):
        submission = {"t1": "Nucleus", "t2": "Membrane", "t3": "Ribosome"}
        assert score_question_answer(question, submission).is_correct

    def test_missing_target(self, question):
        result = score_question_answer(question, {"t1": "Nucleus"})
        assert result.ok
        assert not result.is_correct

    def test_json_encoded_submission(self, question):
        assert score_question_answer(question, '{"t1": "Nucleus", "t2": "Membrane"}').is_correct

    def test_unparseable_submission(self, question):
        result = score_question_answer(question, "nucleus")
        assert result.ok
        assert not result.is_correct

    def test_answer_from_assets(self):
        question = {"type": "image_label", "assets": '{"answer": {"t1": "Axon"}}'}
        assert score_question_answer(question, {"t1": "axon"}).is_correct

    def test_missing_mapping(self):
        result = score_question_answer({"type": "image_label"}, {"t1": "Axon"})
        assert not result.ok
        assert result.reason == "correct_mapping_missing"

    def test_empty_mapping(self):
        result = score_question_answer({"type": "image_label", "answer": "{}"}, None)
        assert not result.ok
        assert result.reason == "correct_mapping_empty"


class TestMultiStepScorer:
    """Test scaffolded and plain multi-step questions."""

    def test_all_steps_correct(self, sample_multi_step):
        result = score_question_answer(sample_multi_step, {"stepAnswers": {"0": "21", "1": "42"}})
        assert result.ok
        assert result.is_correct
        assert result.details == {"steps": ["21", 42]}

    def test_integer_step_keys(self, sample_multi_step):
        assert score_question_answer(sample_multi_step, {"stepAnswers": {0: "21", 1: "42"}}).is_correct

    def test_step_answer_list(self, sample_multi_step):
        assert score_question_answer(sample_multi_step, '{"stepAnswers": ["21", "42"]}').is_correct

    def test_missing_step(self, sample_multi_step):
        result = score_question_answer(sample_multi_step, {"stepAnswers": {"0": "21"}})
        assert result.ok
        assert not result.is_correct

    def test_wrong_step(self, sample_multi_step):
        assert not score_question_answer(sample_multi_step, {"stepAnswers": ["20", "42"]}).is_correct

    def test_legacy_completed_rejected(self, sample_multi_step):
        result = score_question_answer(sample_multi_step, "Completed")
        assert result.ok
        assert not result.is_correct

    def test_legacy_completed_accepted_when_stored(self, sample_multi_step):
        sample_multi_step["answer"] = "Completed"
        assert score_question_answer(sample_multi_step, "completed").is_correct

    def test_step_without_answer(self, sample_multi_step):
        sample_multi_step["assets"]["steps"].append({"prompt": "Halve it"})
        result = score_question_answer(sample_multi_step, {"stepAnswers": ["21", "42", "21"]})
        assert not result.ok
        assert result.reason == "step_answer_missing"

    def test_plain_multi_step_scored_as_mcq(self):
        question = {"type": "multi_step", "options": ["a", "b"], "answer": 0}
        assert score_question_answer(question, "a").is_correct
        assert not score_question_answer(question, 1).is_correct

    def test_plain_multi_step_without_options(self):
        question = {"type": "multi_step", "answer": "done"}
        assert score_question_answer(question, "DONE").is_correct


class TestShortAnswerScorer:
    """Test free-text answers."""

    def test_normalized_equality(self):
        question = {"type": "short_answer", "answer": "Mitochondria"}
        assert score_question_answer(question, "  mitochondria ").is_correct
        assert score_question_answer(question, '"Mitochondria"').is_correct
        assert not score_question_answer(question, "ribosome").is_correct

    def test_json_encoded_stored_answer(self):
        question = {"type": "short_answer", "answer": '"42"'}
        result = score_question_answer(question, 42)
        assert result.is_correct
        assert result.correct_answer == "42"

    def test_numeric_constant_words_compare_as_text(self):
        question = {"type": "short_answer", "answer": "Infinity"}
        result = score_question_answer(question, "Infinity")
        assert result.is_correct
        assert result.correct_answer == "Infinity"
        assert not score_question_answer(question, "NaN").is_correct
