"""Rendering and extraction over full query results.

All functions are pure. Extractors never raise on missing content: they
return ``None``, an empty list, or one of the placeholder strings below so
callers can decide what to show.
"""

from wolfram_knowledge.models import AnalysisResult, Pod, QueryResult

NO_RESULTS = "No results found"
NO_RESULTS_TO_DISPLAY = "No results to display"
NO_SOLUTION = "No solution found"
COULD_NOT_SOLVE = "Could not solve the equation"
NO_STEPS = "No step-by-step solution available"
COULD_NOT_STEP = "Could not generate step-by-step solution"
NO_RESULT = "No result"
COULD_NOT_COMPUTE = "Could not compute expression"
COULD_NOT_ANALYZE = "Could not analyze data"

INPUT_POD_TITLE = "Input"
SOLUTION_TITLES = ("Solution", "Result")
VALUE_TITLES = ("Result", "Value", "Decimal approximation")
STEP_SCANNER = "Solve"
MIN_FACT_LENGTH = 10


def no_facts_message(topic: str) -> str:
    return f"No facts found about {topic}"


def pods_to_render(result: QueryResult) -> list[Pod]:
    """Primary pods if any are marked, otherwise every pod but ``Input``."""
    pods = [pod for pod in result.pods if pod.title != INPUT_POD_TITLE]
    primary = [pod for pod in pods if pod.primary]
    return primary or pods


def format_result(result: QueryResult) -> str:
    """Render a full query result as display text.

    Sections come first (title in bold, then each plain-text fragment),
    followed by an assumptions block and a warnings block when present.

    Args:
        result: Parsed full query result

    Returns:
        Display text, or a placeholder when there is nothing to show
    """
    if not result.success:
        return NO_RESULTS

    output: list[str] = []

    for pod in pods_to_render(result):
        if not pod.subpods:
            continue
        output.append(f"**{pod.title}**")
        output.extend(pod.plaintexts)

    if result.assumptions:
        output.append("\n*Assumptions:*")
        for assumption in result.assumptions:
            if assumption.values:
                output.append("- " + ", ".join(value.desc for value in assumption.values))

    if result.warnings:
        output.append("\n*Warnings:*")
        for warning in result.warnings:
            output.append(f"- {warning.text}")

    return "\n".join(output) or NO_RESULTS_TO_DISPLAY


def _first_plaintext(pod: Pod) -> str | None:
    if not pod.subpods:
        return None
    return pod.subpods[0].plaintext


def find_solution_pod(result: QueryResult) -> Pod | None:
    for pod in result.pods:
        if pod.title in SOLUTION_TITLES or "solution" in pod.title:
            return pod
    return None


def extract_solution(result: QueryResult) -> str | None:
    """Plain text of the first solution-like pod.

    Returns:
        The solution, ``NO_SOLUTION`` when the pod has no text, or None when
        no solution pod exists
    """
    pod = find_solution_pod(result)
    if pod is None or not pod.subpods:
        return None
    return _first_plaintext(pod) or NO_SOLUTION


def extract_steps(result: QueryResult) -> list[str]:
    """Step-by-step text, falling back to every pod as ``title: text``."""
    steps: list[str] = []
    for pod in result.pods:
        if "step" in pod.title or "Step" in pod.title or pod.scanner == STEP_SCANNER:
            steps.extend(pod.plaintexts)

    if not steps:
        for pod in result.pods:
            steps.extend(f"{pod.title}: {text}" for text in pod.plaintexts)

    return steps


def extract_facts(result: QueryResult) -> list[str]:
    """Every fragment longer than ten characters, paired with its pod title."""
    return [
        f"{pod.title}: {text}"
        for pod in result.pods
        for text in pod.plaintexts
        if len(text) > MIN_FACT_LENGTH
    ]


def extract_statistics(data: str, result: QueryResult) -> AnalysisResult:
    """Map each pod title to its plain-text fragments."""
    results: dict[str, list[str]] = {}
    for pod in result.pods:
        texts = pod.plaintexts
        if texts:
            results[pod.title] = texts
    return AnalysisResult(input=data, results=results)


def extract_computed_value(result: QueryResult) -> str | None:
    """Plain text of the first ``Result``/``Value``/``Decimal approximation`` pod."""
    for pod in result.pods:
        if pod.title in VALUE_TITLES and pod.subpods:
            return _first_plaintext(pod) or NO_RESULT
    return None


def format_steps(problem: str, steps: list[str]) -> str:
    lines = [f"**Problem:** {problem}", "", "**Step-by-Step Solution:**"]
    for index, step in enumerate(steps, start=1):
        lines.extend(["", f"**Step {index}:**", step])
    return "\n".join(lines)


def format_analysis(analysis: AnalysisResult) -> str:
    if analysis.error:
        return analysis.error
    lines = ["**Data Analysis:**"]
    for title, values in analysis.results.items():
        lines.extend(["", f"**{title}:**", *values])
    return "\n".join(lines)
