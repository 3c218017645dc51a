# === FILE: canon_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска CanonScout через командную строку.

Команды:
  probe     Проверить варианты URL и вывести/сохранить результаты
  variants  Показать варианты, которые будут проверены для URL (без запросов)
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (кроме stderr)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда probe опции:
  --url, -u URL       Исходный URL (можно несколько раз)
  --file, -f PATH     Файл со списком URL, по одному на строку
  --json PATH         Сохранить результаты (results.json)
  --html PATH         Сохранить HTML-отчёт
  --text PATH         Сохранить текстовый отчёт
  --template DIR      Папка с Jinja2-шаблонами (по умолчанию шаблоны пакета)
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --scan-timeout SEC  Таймаут всей проверки (секунд)
  --concurrency N     Сколько вариантов проверять одновременно (override config)

Дополнительно:
  --version, -v       Показать версию CanonScout

Пример:
  canon-scout probe -u https://example.com/page --json results.json --html report.html
"""
import asyncio
import random
import sys
from pathlib import Path

import click

from canon_scout import __version__
from canon_scout.config import load_config
from canon_scout.engine import start_audit
from canon_scout.ingest import InvalidUrlError, collect_urls, validate_url
from canon_scout.logger import DEFAULT_FORMAT, configure
from canon_scout.report.html_report import render_html
from canon_scout.report.json_report import render_json
from canon_scout.report.text_report import render_text
from canon_scout.variants import generate_variants, normalize_original, random_token

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='CanonScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (вывод в stderr остаётся)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд CanonScout CLI."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('probe', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-u', 'urls', multiple=True, help='Исходный URL (можно повторять)')
@click.option(
    '--file', '-f', 'url_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Файл со списком URL'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить результаты в JSON-файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--text', '-t', 'text_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить текстовый отчёт в файл'
)
@click.option(
    '--template', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help='Таймаут всей проверки (секунд, > 0)'
)
@click.option(
    '--concurrency', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Число одновременных запросов (override concurrency)'
)
@click.pass_context
def probe(ctx, urls, url_file, json_output, html_output, text_output, template_dir, pretty,
          scan_timeout, concurrency):
    """Проверить варианты URL и сгенерировать отчёты."""
    cfg = ctx.obj['config']
    if concurrency is not None:
        cfg = cfg.model_copy(update={'concurrency': concurrency})

    if not urls and url_file is None:
        print_error('Укажите хотя бы один --url или --file')
    try:
        targets = collect_urls(urls, url_file)
    except (InvalidUrlError, FileNotFoundError) as e:
        print_error(f'Ошибка во входных URL: {e}')
    if not targets:
        print_error('Список URL пуст')

    try:
        audit = start_audit(targets, cfg)
        if scan_timeout is not None:
            report = asyncio.run(asyncio.wait_for(audit, timeout=scan_timeout))
        else:
            report = asyncio.run(audit)
    except asyncio.TimeoutError:
        print_error(f'Проверка не завершена за {scan_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при проверке: {e}')

    # Если не сохраняем в файл — печатаем в stdout
    if not (json_output or html_output or text_output):
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=True)
            click.echo(f'JSON results: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')

    if text_output:
        try:
            saved_text = render_text(report, text_output)
            click.echo(f'Text report: {saved_text}')
        except Exception as e:
            print_error(f'Ошибка при сохранении текстового отчёта: {e}')


@cli.command('variants', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--seed', type=int, default=None, help='Seed для случайного сегмента пути')
def show_variants(url, seed):
    """Показать варианты URL, которые будут проверены (без сетевых запросов)."""
    try:
        original = normalize_original(validate_url(url))
    except InvalidUrlError as e:
        print_error(str(e))
    token_factory = None
    if seed is not None:
        rng = random.Random(seed)
        token_factory = lambda: random_token(rng)  # noqa: E731
    for variant in generate_variants(original, token_factory=token_factory):
        click.echo(variant)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
