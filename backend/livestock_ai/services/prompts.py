"""Prompt templates for livestock Q&A and symptom diagnosis.

Chunk text is interpolated as-is. The knowledge base is an internal,
trusted corpus; nothing here makes untrusted text safe to embed in a prompt.
"""

from __future__ import annotations

from collections.abc import Sequence

from livestock_ai.models.rag import ChatMessage, TextChunk

ANSWER_SYSTEM_PROMPT = """\
You are a helpful AI assistant specialized in livestock health and veterinary \
care. Provide detailed answers of 7-10 sentences tailored to the specific \
question. Base your answers ONLY on the provided context.\
"""

DIAGNOSIS_SYSTEM_PROMPT = """\
You are a veterinary AI assistant specializing in livestock health. Provide \
comprehensive diagnostic reports tailored to the exact symptom combination \
presented. Always use the exact format requested.\
"""

GENERAL_PROMPT_TEMPLATE = """\
You are a helpful AI assistant specialized in livestock health and veterinary \
care. Use the provided context to answer the user's question accurately and \
concisely.

Context from documents:
{context}

User Question: {question}

Instructions:
- Answer based ONLY on the information provided in the context above
- If the context doesn't contain enough information to answer the question, say so clearly
- Be specific and cite relevant details from the context
- Keep your answer clear and practical for farmers
- If discussing medications or treatments, emphasize consulting a veterinarian for specific cases

Answer:"""

DIAGNOSTIC_PROMPT_TEMPLATE = """\
You are a veterinary AI assistant specializing in livestock health. Based on \
the medical knowledge provided, diagnose the most likely disease.

Medical Knowledge Base:
{context}

Patient Symptoms:
{symptoms}

Provide a diagnosis in EXACTLY this format:
DISEASE: [specific disease name]
CONFIDENCE: [High/Medium/Low]
EXPLANATION: [2-3 sentences explaining why these symptoms match this disease]
TREATMENT: [primary treatment approach or medicine category]

Be specific with the disease name. Use medical terminology where appropriate."""

DIAGNOSTIC_QUERY_TEMPLATE = """\
A cattle is showing these symptoms:
{symptoms}

What disease does it likely have?"""


def format_symptom_list(symptoms: Sequence[str]) -> str:
    """Render symptoms as ``- symptom`` bullets, preserving input order."""
    return "\n".join(f"- {s}" for s in symptoms)


def _numbered_context(label: str, chunks: Sequence[TextChunk]) -> str:
    return "\n\n".join(
        f"[{label} {idx}]\n{chunk.text}" for idx, chunk in enumerate(chunks, start=1)
    )


def build_general_prompt(question: str, chunks: Sequence[TextChunk]) -> str:
    """Build the open Q&A prompt with chunks numbered ``[Context i]``."""
    return GENERAL_PROMPT_TEMPLATE.format(
        context=_numbered_context("Context", chunks),
        question=question,
    )


def build_diagnostic_query(symptoms: Sequence[str]) -> str:
    """Build the retrieval query used to embed a symptom list."""
    return DIAGNOSTIC_QUERY_TEMPLATE.format(symptoms=format_symptom_list(symptoms))


def build_diagnostic_prompt(symptoms: Sequence[str], chunks: Sequence[TextChunk]) -> str:
    """Build the diagnosis prompt with chunks numbered ``[Medical Reference i]``."""
    return DIAGNOSTIC_PROMPT_TEMPLATE.format(
        context=_numbered_context("Medical Reference", chunks),
        symptoms=format_symptom_list(symptoms),
    )


def build_messages(system_prompt: str, user_prompt: str) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=system_prompt),
        ChatMessage(role="user", content=user_prompt),
    ]
