# cadocr

Application services for recognising CAD drawings with a multimodal model.
The package provides the pieces that sit around the model call; it has no
dependencies beyond the standard library.

- `cadocr.commands`: request objects as dataclasses
  (`AnalyzeDrawingCommand`, `GenerateApiKeyCommand`, `RotateApiKeyCommand`,
  `SetQuotaCommand`).
- `cadocr.errors`: `DomainError` and its subclasses `ValidationError`
  (also a `ValueError`; carries `field` and `message`) and
  `ExternalServiceError` (carries `service`, `operation` and `message`).
- `cadocr.quota`: `QuotaService`, which checks, reads and sets a user's daily
  quota through a database object you supply, and returns `UserQuota` values.
- `cadocr.classification`: `TemplateClassificationAppService`, which wraps a
  `TemplateClassifier` and adds a result cache (`ClassificationCache`), a
  per-call timeout and batch classification with bounded concurrency.
- `cadocr.reports`: Markdown export of multi-page PDF analysis results
  (`export_pdf_report`) and of a dialog history made of `ChatMessage`
  values (`export_dialog_history`).
- `cadocr.archive`: collecting report files into an export directory
  (`export_all`) or into a `.tar.gz` archive (`archive_reports`).

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Quotas

`QuotaService(db, default_daily_limit)` expects `db` to offer three
coroutine methods:

- `consume_and_get_quota(user_id, amount)`
- `get_user_quota(user_id)`
- `set_user_quota(user_id, daily_limit)`

The first two return an object with the attributes `user_id`,
`daily_limit`, `used_today` and `last_reset_date`, which the service copies
into a `UserQuota`. `check_and_consume(user_id)` consumes one unit in a
single database call. Any exception raised by the database is re-raised as
`ExternalServiceError` naming the operation. `set_quota(user_id, 0)` raises
`ValidationError` without touching the database. `default_limit()` returns
the limit given to the constructor.

## Classification with a cache

```python
import asyncio

from cadocr.classification import (
    ClassificationResult,
    TemplateClassifier,
    TemplateClassificationAppConfig,
    TemplateClassificationAppService,
)


class MyClassifier(TemplateClassifier):
    async def classify(self, image_data):
        return ClassificationResult(
            template_type="culvert_layout",
            confidence=0.9,
            needs_review=False,
            source="model",
        )


async def run():
    service = TemplateClassificationAppService(
        MyClassifier(), TemplateClassificationAppConfig()
    )
    first = await service.classify(b"image bytes")   # source == "model"
    second = await service.classify(b"image bytes")  # source == "cache", confidence 1.0
    print(first.source, second.source, service.hit_rate())


asyncio.run(run())
```

Details:

- `TemplateClassificationAppConfig` defaults: `batch_max_concurrency=10`,
  `classification_timeout_secs=60`, `enable_cache=True`,
  `cache_max_entries=1000`.
- The cache is keyed by the SHA-256 of the image bytes, evicts the least
  recently used entry when full, and counts hits and misses.
  A cache hit is answered with confidence `1.0`, `needs_review=False` and
  source `"cache"`. A `ClassificationCache` may be passed to the service to
  share it between services.
- A classifier call that exceeds the timeout raises `ExternalServiceError`;
  other classifier errors propagate unchanged.
- `classify_batch(BatchClassificationRequest(images, max_concurrency=None))`
  classifies all images with at most the given number running at once,
  keeps their order in `results`, and raises the first failure. The
  response also reports the cache hits and misses during the batch and the
  elapsed time in milliseconds.
- `cache_stats()`, `hit_rate()` and `clear_cache()` are plain (not async)
  methods. `clear_cache()` empties the entries but keeps the counters.

## Exporting a PDF report

```python
from pathlib import Path

from cadocr.reports import export_pdf_report

page_results = [
    ("plan.pdf:1", "Page one analysis"),
    ("plan.pdf:2", RuntimeError("timeout")),
]
export_pdf_report(page_results, "Summary across pages", Path("pdf_report.md"))
```

A page result pairs a `path:page` identifier with either the analysis text
or the exception that made the page fail. The report has statistics, a
table of contents, the failed pages, each page's result and the cross-page
summary, if one is given. `now` may be passed to fix the timestamp written
into the report. `page_number("plan.pdf:2")` returns `"2"`.

`export_dialog_history(history, output_path, model, client_name,
drawing_type, now=None)` writes a sequence of `ChatMessage(role, content,
images=None)` values as Markdown: system prompts in a code block, user and
assistant messages numbered by round, and the number of attached images.
Messages with any other role get only a separator.

## Archiving reports

```python
from pathlib import Path

from cadocr.archive import archive_reports, export_all

copied = export_all(Path("."), Path("export"))
result = archive_reports(Path("."), Path("cad_reports.tar.gz"))
if result is None:
    print("nothing to archive")
else:
    count, size_bytes = result
```

`export_all` copies files named `pdf_report_*.md`, `dialog_*.md`,
`batch_results_*.json` and `batch_results_*.csv`, creating the export
directory if needed, and returns how many were copied. `archive_reports`
takes those files plus `.batch_progress_*.json`, stores them flat at the
root of the archive, and returns the file count and archive size, or `None`
without writing anything when no file matches. `is_export_candidate` and
`is_archive_candidate` expose the name rules; `create_tar_gz_archive`
archives an explicit list of files.

## What this package does not do

It does not talk to a model: there is no API client, no classifier beyond
the abstract `TemplateClassifier`, and no image or PDF loading. It has no
interactive command-line dialog, no batch runner, no web server and no
database; quota storage is whatever object you pass to `QuotaService`.