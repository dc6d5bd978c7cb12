OCR_PROMPT = """
Transcribe ALL the text printed on this Brazilian lottery receipt, line by line, exactly as it appears.
Keep numbers, labels and the spacing between numbers.

IMPORTANT:
- Return ONLY the transcribed text, no comments
- Do not summarise, translate or correct anything
- If the image has no readable text, return an empty response
"""

RECEIPT_PROMPT_TEMPLATE = """
Analyze the OCR text below, read from a receipt of a Caixa Econômica Federal (Brazil) lottery game.
Extract three things: the game type, the contest number and every sequence of numbers that was bet.

Rules:
- "tipoJogo" must be one of: {lotteries}
- The contest number usually follows "CONCURSO", "CONC" or "C:"
- Include ALL bets visible on the receipt; numbers are integers
- The OCR text may contain recognition errors; infer the intended values when possible

Return ONLY a valid JSON object with this structure:
{{"tipoJogo": "megasena", "concurso": 2850, "apostas": [[4, 8, 15, 16, 23, 42], [1, 2, 3, 4, 5, 6]]}}

Use null for any field you cannot find, for example:
{{"tipoJogo": "megasena", "concurso": null, "apostas": []}}

OCR text:
\"\"\"
{text}
\"\"\"
"""
