# canon_scout/report/json_report.py

"""
Сохранение результатов проверки CanonScout в JSON.

Формат: исходный URL -> список записей (все поля присутствуют всегда),
либо ``{"url": ..., "error": ...}`` для URL, проверка которого упала.
"""
import json
from pathlib import Path

from canon_scout.aggregator import AuditReport


def render_json(report: AuditReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект AuditReport с результатами проверки
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела (как в results.json по умолчанию)
    :return: Path сохранённого файла

    Пример:
    ```python
    from canon_scout.report.json_report import render_json
    report_path = render_json(report, 'results.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
