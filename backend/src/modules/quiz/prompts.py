"""Prompt templates for quiz generation and free-text answer judging."""

from .schemas import QuizType

TYPE_INSTRUCTIONS = {
    QuizType.MCQ: "Generate {count} Multiple Choice Questions. Each question should have 4 options and one correct answer.",
    QuizType.SAQ: "Generate {count} Short Answer Questions. These should require brief, factual responses.",
    QuizType.LAQ: "Generate {count} Long Answer Questions. These should require detailed explanations.",
}

QUIZ_PROMPT_TEMPLATE = """
You are an expert quiz creator for students. Based ONLY on the document content below, create educational questions.

{type_instruction}

Return a JSON object with a "questions" array. Each question should have:
- "type": "{quiz_type}"
- "question": The question text
{options_line}- "correct_answer": The correct answer{answer_note}
- "explanation": Brief explanation of the correct answer
- "difficulty": "easy", "medium", or "hard"

Documents: {document_names}
---
{context}
---

Generate the quiz now as valid JSON.
"""

GRADING_PROMPT_TEMPLATE = """
You are evaluating a student's answer to a question. Please determine if the answer is correct and provide a detailed explanation.

Question: {question}
Correct Answer: {correct_answer}
Student's Answer: {user_answer}

Please respond with a JSON object in this format:
{{
  "isCorrect": boolean,
  "explanation": "Detailed explanation of why the answer is correct or incorrect, and what the correct answer should include"
}}

For short answer questions (SAQ), the student's answer should capture the key concepts even if not word-for-word.
For long answer questions (LAQ), evaluate based on completeness, accuracy, and understanding of key concepts.
"""


def build_quiz_prompt(quiz_type: QuizType, question_count: int, document_names: str, context: str) -> str:
    is_mcq = quiz_type == QuizType.MCQ
    return QUIZ_PROMPT_TEMPLATE.format(
        type_instruction=TYPE_INSTRUCTIONS[quiz_type].format(count=question_count),
        quiz_type=quiz_type.value,
        options_line='- "options": Array of exactly 4 strings\n' if is_mcq else "",
        answer_note=" (must exactly match one of the options)" if is_mcq else "",
        document_names=document_names,
        context=context,
    )


def build_grading_prompt(question: str, correct_answer: str, user_answer: str) -> str:
    return GRADING_PROMPT_TEMPLATE.format(question=question, correct_answer=correct_answer, user_answer=user_answer)
