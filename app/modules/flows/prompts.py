"""Prompt templates for the AI flows."""

from __future__ import annotations

from app.modules.ai.templates import PromptTemplate
from app.modules.flows.models import (
    CodeTaskInput,
    CourseDescriptionInput,
    DistractorsInput,
    ExplainCodeSnippetInput,
    ProvideHintInput,
    ReviewCodeInput,
    TranscriptPromptInput,
)


EXPLAIN_CODE_SNIPPET = PromptTemplate(
    "explain_code_snippet",
    """You are an expert coding tutor. Your job is to explain code snippets in simpler terms so that students can better understand them.

Here is the code snippet that needs explanation:

```
{{{code_snippet}}}
```

Explain this code snippet as if you were talking to a student. Provide code examples if possible.
""",
    ExplainCodeSnippetInput,
)


REVIEW_CODE = PromptTemplate(
    "review_code_and_provide_feedback",
    """You are a playful and helpful AI code reviewer for a coding game.

The user's submitted code is incorrect. Your task is to provide feedback.

There are two scenarios:
1. The user's code is functionally correct but has an alignment/formatting issue (common in Python). If so, focus your feedback ONLY on the alignment. Be concise and explain why the alignment is important in this language.
2. The user's code is functionally incorrect. Identify the likely error (e.g., syntax error, logic error) and provide a playful, encouraging hint to help them fix it. Do NOT give them the direct answer.

Here is the context:
- Programming Language: {{{programming_language}}}
- User's Submitted Code:
```
{{{code}}}
```
- The Correct Solution:
```
{{{solution}}}
```

Analyze the user's code against the solution and provide feedback based on the two scenarios above.""",
    ReviewCodeInput,
)


PROVIDE_HINT = PromptTemplate(
    "provide_hint_for_code_practice",
    """You are an AI coding tutor. A student is working on a code practice problem and has requested a hint.

Problem Statement: {{{problem_statement}}}

User's Current Code (if any):
{{#if user_code}}{{{user_code}}}
{{else}}No code provided yet.
{{/if}}
Provide a helpful hint to guide the student towards the solution, without giving away the answer directly. Focus on explaining the logic or suggesting a next step.
""",
    ProvideHintInput,
)


COURSE_DESCRIPTION = PromptTemplate(
    "generate_course_description",
    """You are an expert curriculum designer and copywriter.
Your task is to generate a compelling, one-paragraph course description based on the provided course title.
The description should be engaging, informative, and encourage students to enroll.

Course Title: {{{course_title}}}
""",
    CourseDescriptionInput,
)


CODE_TASK = PromptTemplate(
    "generate_code_task",
    """You are an expert curriculum designer for a coding education platform.
Your task is to generate a beginner-level coding challenge based on a given topic and programming language.
The output should be a single Markdown string with the following sections:

### Problem
A clear and concise description of the coding problem.

### Starter Code
A block of starter code for the user to begin with. Use Markdown for the code block with the correct language identifier.

### Solution
The complete solution code. Use a Markdown code block with the correct language identifier.

---

Topic: {{{topic_title}}}
Language: {{{programming_language}}}
""",
    CodeTaskInput,
)


DISTRACTORS = PromptTemplate(
    "generate_distractors",
    """You are a game content designer for a coding game. Your task is to create plausible but incorrect code snippets to act as 'distractors' or 'enemies' in a coding game.

The game is for the "{{language}}" language.

The correct code sequence for the level is:
{{#each correct_snippets}}
- {{{this}}}
{{/each}}

Based on this correct sequence, generate a list of exactly {{{count}}} unique distractor snippets. These should look like code, but be incorrect. They could be:
- Common typos (e.g., "functoin" instead of "function").
- Keywords from other languages (e.g., using "def" in JavaScript).
- Logically incorrect but syntactically valid pieces of code.
- Common beginner mistakes.
- Do not include any of the correct snippets in your distractor list.
- Each distractor should be a single word or a very short snippet, similar in length to the correct snippets.
- Do NOT include comments or explanations. Just the code snippets.
""",
    DistractorsInput,
)


VIDEO_INSIGHTS = PromptTemplate(
    "extract_video_insights",
    """You are an expert curriculum designer for an online learning platform.
Based on the following video transcript, you will perform two tasks:
1.  Generate a concise, single-paragraph summary of the video's key points. This summary will be shown to students.
2.  Generate a quiz with exactly 5 multiple-choice questions that test the main concepts from the video. Each question should have 3 or 4 options, and the correct answer must be copied exactly from one of the options.

Video Transcript:
---
{{{transcript}}}
---
""",
    TranscriptPromptInput,
)


QUIZ_FROM_TRANSCRIPT = PromptTemplate(
    "generate_quiz_from_transcript",
    """You are a curriculum designer for an online learning platform.
Based on the following video transcript, please generate a quiz with 5 to 7 multiple-choice questions.
Each question should have 3 or 4 options, and the correct answer must be copied exactly from one of the options.
The quiz should test the key concepts and information presented in the video.

Video Transcript:
---
{{{transcript}}}
---
""",
    TranscriptPromptInput,
)
