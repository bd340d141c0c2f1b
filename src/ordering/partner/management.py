"""Partner API key management — commands and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.partner.api_key import ApiKey

logger = structlog.get_logger(__name__)


@ordering.command(part_of="ApiKey")
class IssueApiKey:
    name = String(required=True, max_length=100)
    description = Text()


@ordering.command(part_of="ApiKey")
class SetApiKeyActive:
    api_key_id = Identifier(required=True)
    is_active = Boolean(required=True)


@ordering.command_handler(part_of=ApiKey)
class ApiKeyManagementHandler:
    @handle(IssueApiKey)
    def issue_api_key(self, command):
        api_key = ApiKey.issue(command.name, command.description)
        current_domain.repository_for(ApiKey).add(api_key)
        logger.info("API key issued", api_key_id=str(api_key.id), name=api_key.name)
        return {"id": str(api_key.id), "key": api_key.key}

    @handle(SetApiKeyActive)
    def set_api_key_active(self, command):
        repo = current_domain.repository_for(ApiKey)
        api_key = repo.get(command.api_key_id)
        if command.is_active:
            api_key.activate()
        else:
            api_key.deactivate()
        repo.add(api_key)
        logger.info("API key status changed", api_key_id=str(api_key.id), is_active=api_key.is_active)
        return api_key.is_active


@ordering.command(part_of="ApiKey")
class RecordApiKeyUse:
    api_key_id = Identifier(required=True)


@ordering.command_handler(part_of=ApiKey)
class RecordApiKeyUseHandler:
    @handle(RecordApiKeyUse)
    def record_api_key_use(self, command):
        repo = current_domain.repository_for(ApiKey)
        api_key = repo.get(command.api_key_id)
        api_key.touch()
        repo.add(api_key)
