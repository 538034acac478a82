"""Application orchestration entry points."""

from __future__ import annotations

import threading
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from blobmend.adapters.filesystem import FileBlobStoreManager
from blobmend.adapters.reconciliation_log import ReconciliationLogger
from blobmend.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMetadataUnitOfWork,
    is_started,
    startup,
)
from blobmend.config.storage import get_database_config, get_storage_config
from blobmend.domain.errors import BlobStoreNotFoundError
from blobmend.domain.maintenance import AssetBlobStoreUsageChecker, AssetMaintenanceService
from blobmend.domain.model import (
    BLOB_NAME_HEADER,
    CONTENT_TYPE_HEADER,
    REPO_NAME_HEADER,
    Asset,
    Repository,
    RepositoryType,
)
from blobmend.domain.ports.unit_of_work import MetadataUnitOfWork
from blobmend.domain.restore import (
    DEFAULT_INTEGRITY_STRATEGY,
    CancellationToken,
    IntegrityStrategyRegistry,
    RestoreMetadataTask,
    RestoreStrategyRegistry,
)
from blobmend.domain.strategies import (
    RAW_FORMAT,
    DefaultIntegrityCheckStrategy,
    RawRestoreBlobStrategy,
)

if TYPE_CHECKING:
    from blobmend.config.storage import StorageConfig
    from blobmend.domain.restore import RestoreResult, TaskConfiguration

UnitOfWorkFactory = Callable[[], MetadataUnitOfWork]

TASK_THREAD_NAME = "restore-metadata-task"

log = getLogger(__name__)


def _ensure_started(storage: StorageConfig) -> None:
    if not is_started():
        startup(database_uri=get_database_config(storage=storage).uri)


def run_restore_metadata(
    configuration: TaskConfiguration,
    *,
    storage: StorageConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    cancellation: CancellationToken | None = None,
) -> RestoreResult:
    """Run the restore-metadata task against the configured work directory."""

    storage_config = storage or get_storage_config()
    if unit_of_work_factory is None:
        _ensure_started(storage_config)
    effective_uow = unit_of_work_factory or SqlAlchemyMetadataUnitOfWork
    reconciliation_log = ReconciliationLogger(storage_config.reconciliation_log_root())
    blob_stores = FileBlobStoreManager(
        storage_config.blobs_root(), reconciliation_log=reconciliation_log
    )
    log.info(
        "Starting restore of blob store '%s': restore=%s, undelete=%s, integrity_check=%s, "
        "dry_run=%s, since_days=%s",
        configuration.blob_store_name,
        configuration.restore_blobs,
        configuration.undelete_blobs,
        configuration.integrity_check,
        configuration.dry_run,
        configuration.since_days,
    )

    with effective_uow() as uow:
        assets = uow.repositories.assets
        task = RestoreMetadataTask(
            configuration,
            blob_store_manager=blob_stores,
            repositories=uow.repositories.repositories,
            restore_strategies=RestoreStrategyRegistry({RAW_FORMAT: RawRestoreBlobStrategy(uow)}),
            integrity_strategies=IntegrityStrategyRegistry(
                {DEFAULT_INTEGRITY_STRATEGY: DefaultIntegrityCheckStrategy(assets)}
            ),
            usage_checker=AssetBlobStoreUsageChecker(assets),
            maintenance=AssetMaintenanceService(uow),
            reconciliation_log=reconciliation_log,
            cancellation=cancellation,
        )
        result = task.execute()

    log.info(
        "Finished restore of blob store '%s': processed=%s, undeleted=%s, cancelled=%s",
        configuration.blob_store_name,
        result.processed,
        result.undeleted,
        result.cancelled,
    )
    return result


def run_on_task_thread(
    target: Callable[[], RestoreResult],
    *,
    name: str = TASK_THREAD_NAME,
) -> RestoreResult:
    """Run ``target`` on a dedicated thread and hand back its result or error."""

    outcome: dict[str, RestoreResult] = {}
    failure: list[BaseException] = []

    def _run() -> None:
        try:
            outcome["result"] = target()
        except BaseException as exc:  # noqa: BLE001
            failure.append(exc)

    worker = threading.Thread(target=_run, name=name, daemon=True)
    worker.start()
    # join with a timeout so the main thread keeps receiving signals
    while worker.is_alive():
        worker.join(timeout=0.5)
    if failure:
        raise failure[0]
    return outcome["result"]


def create_repository(
    *,
    name: str,
    format_name: str,
    blob_store_name: str,
    repository_type: RepositoryType = RepositoryType.HOSTED,
    storage: StorageConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Repository:
    """Register a repository and create its blob store directory if needed."""

    storage_config = storage or get_storage_config()
    if unit_of_work_factory is None:
        _ensure_started(storage_config)
    effective_uow = unit_of_work_factory or SqlAlchemyMetadataUnitOfWork
    FileBlobStoreManager(storage_config.blobs_root()).create(blob_store_name)

    repository = Repository(
        name=name,
        format=format_name,
        type=repository_type,
        blob_store_name=blob_store_name,
    )
    with effective_uow() as uow:
        uow.repositories.repositories.add(repository)
        uow.commit()
    log.info(
        "Created %s repository %s (%s) in blob store %s",
        repository_type,
        name,
        format_name,
        blob_store_name,
    )
    return repository


def upload_asset(
    *,
    repository_name: str,
    name: str,
    content: bytes,
    content_type: str | None = None,
    storage: StorageConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Asset:
    """Store ``content`` as a blob of the repository's blob store and record its asset."""

    storage_config = storage or get_storage_config()
    if unit_of_work_factory is None:
        _ensure_started(storage_config)
    effective_uow = unit_of_work_factory or SqlAlchemyMetadataUnitOfWork
    reconciliation_log = ReconciliationLogger(storage_config.reconciliation_log_root())
    blob_stores = FileBlobStoreManager(
        storage_config.blobs_root(), reconciliation_log=reconciliation_log
    )

    with effective_uow() as uow:
        repository = uow.repositories.repositories.get(repository_name)
        if repository is None:
            raise LookupError(f"Repository '{repository_name}' not found")
        if not repository.has_own_storage:
            raise ValueError(f"Repository '{repository_name}' is a group and stores no content")
        blob_store = blob_stores.get(repository.blob_store_name)
        if blob_store is None:
            raise BlobStoreNotFoundError(repository.blob_store_name)

        headers = {BLOB_NAME_HEADER: name, REPO_NAME_HEADER: repository.name}
        if content_type:
            headers[CONTENT_TYPE_HEADER] = content_type
        blob = blob_store.create(content, headers)
        asset = Asset(
            repository_name=repository.name,
            name=name,
            blob_store_name=blob_store.name,
            blob_id=blob.id.value,
            sha1=blob.metrics.sha1,
            size=blob.metrics.size,
            content_type=content_type,
        )
        uow.repositories.assets.add(asset)
        uow.commit()

    log.info("Uploaded %s to repository %s as blob %s", name, repository_name, blob.id)
    return asset
