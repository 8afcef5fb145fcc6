"""
Test cases for quiz listing, taking and submission.
"""
import logging

import pytest

from quizapp.quiz.player_routes import parse_form_submission, parse_json_submission

API = '/quiz/api'


def _flags(quiz):
    return [o.get('is_correct') for q in quiz['questions'] for o in q['options']]


class TestBrowsing:
    """Test cases for the public quiz list and details."""

    def test_list_quizzes_anonymously(self, client, seeded_quiz):
        response = client.get(f'{API}/quizzes')
        assert response.status_code == 200
        quizzes = response.get_json()['quizzes']
        assert len(quizzes) == 1
        assert quizzes[0]['title'] == 'General Knowledge'
        assert quizzes[0]['question_count'] == 2
        assert quizzes[0]['total_points'] == 5

    def test_list_is_empty_without_quizzes(self, client):
        response = client.get(f'{API}/quizzes')
        assert response.status_code == 200
        assert response.get_json()['quizzes'] == []

    def test_details_hide_answers_from_players(self, player_client, seeded_quiz):
        response = player_client.get(f"{API}/quizzes/{seeded_quiz['quiz_id']}")
        assert response.status_code == 200
        assert set(_flags(response.get_json()['quiz'])) == {None}

    def test_details_show_answers_to_admins(self, admin_client, seeded_quiz):
        response = admin_client.get(f"{API}/quizzes/{seeded_quiz['quiz_id']}")
        quiz = response.get_json()['quiz']
        assert _flags(quiz) == [True, False, False, True, False]

    def test_details_of_missing_quiz(self, client):
        response = client.get(f'{API}/quizzes/999')
        assert response.status_code == 404
        assert response.get_json()['success'] is False


class TestTakeQuiz:
    """Test cases for loading a quiz to answer it."""

    def test_take_requires_login(self, client, seeded_quiz):
        assert client.get(f"{API}/quizzes/{seeded_quiz['quiz_id']}/take").status_code == 401

    def test_take_quiz(self, player_client, seeded_quiz):
        response = player_client.get(f"{API}/quizzes/{seeded_quiz['quiz_id']}/take")
        assert response.status_code == 200
        quiz = response.get_json()['quiz']
        assert [q['text'] for q in quiz['questions']] == ['Capital of France?', '2 + 2 = ?']
        assert quiz['questions'][0]['field_name'] == f"question_{seeded_quiz['q1']}"
        assert set(_flags(quiz)) == {None}

    def test_admin_take_view_has_no_answers(self, admin_client, seeded_quiz):
        response = admin_client.get(f"{API}/quizzes/{seeded_quiz['quiz_id']}/take")
        assert set(_flags(response.get_json()['quiz'])) == {None}

    def test_take_missing_quiz(self, player_client):
        assert player_client.get(f'{API}/quizzes/999/take').status_code == 404


class TestSubmitQuiz:
    """Test cases for scoring a submission."""

    def _submit_form(self, client, quiz_id, answers):
        return client.post(f'{API}/quizzes/{quiz_id}/submit', data=answers)

    def test_submit_requires_login(self, client, seeded_quiz):
        response = client.post(f"{API}/quizzes/{seeded_quiz['quiz_id']}/submit", data={})
        assert response.status_code == 401

    def test_all_correct_form_submission(self, player_client, seeded_quiz):
        response = self._submit_form(player_client, seeded_quiz['quiz_id'], {
            f"question_{seeded_quiz['q1']}": str(seeded_quiz['q1_correct']),
            f"question_{seeded_quiz['q2']}": str(seeded_quiz['q2_correct']),
        })
        assert response.status_code == 200
        result = response.get_json()['result']
        assert result['quizTitle'] == 'General Knowledge'
        assert (result['earnedPoints'], result['totalPoints']) == (5, 5)
        assert result['diagnostics'] == []

    def test_partially_correct_json_submission(self, player_client, seeded_quiz):
        response = player_client.post(f"{API}/quizzes/{seeded_quiz['quiz_id']}/submit", json={
            'answers': {
                str(seeded_quiz['q1']): seeded_quiz['q1_correct'],
                str(seeded_quiz['q2']): seeded_quiz['q2_wrong'],
            }
        })
        result = response.get_json()['result']
        assert (result['earnedPoints'], result['totalPoints']) == (3, 5)
        assert [a['status'] for a in result['answers']] == ['correct', 'incorrect']

    def test_empty_submission(self, player_client, seeded_quiz):
        response = self._submit_form(player_client, seeded_quiz['quiz_id'], {})
        result = response.get_json()['result']
        assert (result['earnedPoints'], result['totalPoints']) == (0, 5)
        assert {a['status'] for a in result['answers']} == {'unanswered'}

    def test_option_from_another_question(self, player_client, seeded_quiz, caplog):
        """Test a forged option id scores 0 and is logged as a security event."""
        with caplog.at_level(logging.WARNING):
            response = self._submit_form(player_client, seeded_quiz['quiz_id'], {
                f"question_{seeded_quiz['q1']}": str(seeded_quiz['q2_correct']),
            })

        assert response.status_code == 200
        result = response.get_json()['result']
        assert result['earnedPoints'] == 0
        assert result['diagnostics'] == [{
            'code': 'invalid_answer_reference',
            'message': result['diagnostics'][0]['message'],
            'question_id': seeded_quiz['q1'],
            'option_id': seeded_quiz['q2_correct'],
        }]
        assert 'Invalid answer reference' in caplog.text

    def test_malformed_option_id(self, player_client, seeded_quiz):
        response = self._submit_form(player_client, seeded_quiz['quiz_id'], {
            f"question_{seeded_quiz['q1']}": 'not-a-number',
            f"question_{seeded_quiz['q2']}": str(seeded_quiz['q2_correct']),
        })
        result = response.get_json()['result']
        assert (result['earnedPoints'], result['totalPoints']) == (2, 5)
        assert result['diagnostics'][0]['option_id'] == 'not-a-number'

    def test_unrelated_fields_are_ignored(self, player_client, seeded_quiz):
        response = self._submit_form(player_client, seeded_quiz['quiz_id'], {
            'csrf_token': 'abc',
            'question_x': '1',
            'question_9999': '1',
            f"question_{seeded_quiz['q2']}": str(seeded_quiz['q2_correct']),
        })
        result = response.get_json()['result']
        assert result['earnedPoints'] == 2
        assert result['diagnostics'] == []

    @pytest.mark.parametrize('body', [[1, 2], 'answers', 42, {'answers': 'x'}])
    def test_json_body_of_wrong_shape_scores_as_empty(self, player_client, seeded_quiz, body):
        """Test a non-object JSON body is scored as an empty submission."""
        response = player_client.post(f"{API}/quizzes/{seeded_quiz['quiz_id']}/submit", json=body)
        assert response.status_code == 200
        result = response.get_json()['result']
        assert (result['earnedPoints'], result['totalPoints']) == (0, 5)
        assert {a['status'] for a in result['answers']} == {'unanswered'}

    def test_answers_for_other_questions_are_logged(self, player_client, seeded_quiz, caplog):
        with caplog.at_level(logging.INFO):
            response = player_client.post(f"{API}/quizzes/{seeded_quiz['quiz_id']}/submit", json={
                'answers': {'9999': 1, str(seeded_quiz['q1']): seeded_quiz['q1_correct']},
            })

        assert response.get_json()['result']['earnedPoints'] == 3
        assert 'ignored answers for questions [9999]' in caplog.text

    def test_submit_missing_quiz(self, player_client):
        assert player_client.post(f'{API}/quizzes/999/submit', data={}).status_code == 404


class TestSubmissionParsing:
    """Test cases for turning request data into a submission mapping."""

    def test_parse_form_submission(self):
        form = {'question_3': '12', 'question_4': ' 15 ', 'question_': '1', 'other': '2', 'question_5': 'abc'}
        assert parse_form_submission(form) == {3: 12, 4: 15, 5: 'abc'}

    def test_parse_json_submission(self):
        data = {'answers': {'3': 12, '4': '15', 'bad': 1, '5': True}}
        assert parse_json_submission(data) == {3: 12, 4: 15, 5: 'True'}

    def test_parse_json_without_answers(self):
        assert parse_json_submission({}) == {}
        assert parse_json_submission({'answers': [1, 2]}) == {}

    def test_parse_json_of_wrong_shape(self):
        assert parse_json_submission([1, 2]) == {}
        assert parse_json_submission('answers') == {}
        assert parse_json_submission(None) == {}
