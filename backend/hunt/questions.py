"""Question bank: ``bank[story - 1][stage - 1][phase - 1]``."""

import json
import os

from hunt.services.game.progression import PHASES_PER_STAGE, STORIES

DEFAULT_QUESTIONS_PATH = os.path.join(os.path.dirname(__file__), 'data', 'questions.json')


class QuestionBank:
    def __init__(self, stories):
        if len(stories) != len(STORIES):
            raise ValueError(f"question bank needs {len(STORIES)} stories, got {len(stories)}")
        for story_idx, stages in enumerate(stories, start=1):
            if len(stages) != len(PHASES_PER_STAGE):
                raise ValueError(f"story {story_idx} needs {len(PHASES_PER_STAGE)} stages, got {len(stages)}")
            for stage_idx, phases in enumerate(stages, start=1):
                expected = PHASES_PER_STAGE[stage_idx]
                if len(phases) != expected:
                    raise ValueError(f"story {story_idx} stage {stage_idx} needs {expected} phases, got {len(phases)}")
                for entry in phases:
                    if 'answer' not in entry:
                        raise ValueError(f"story {story_idx} stage {stage_idx} has a question without an answer")
        self._stories = stories

    def lookup(self, story: int, stage: int, phase: int) -> dict:
        return self._stories[story - 1][stage - 1][phase - 1]

    def public(self, story: int, stage: int, phase: int) -> dict:
        """Question content with the answer removed."""
        return {k: v for k, v in self.lookup(story, stage, phase).items() if k != 'answer'}

    def is_correct(self, story: int, stage: int, phase: int, answer: str) -> bool:
        expected = self.lookup(story, stage, phase)['answer']
        return expected.strip().lower() == answer.strip().lower()


def load_question_bank(path=None) -> QuestionBank:
    with open(path or DEFAULT_QUESTIONS_PATH, encoding='utf-8') as fh:
        return QuestionBank(json.load(fh))
