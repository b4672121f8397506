from mailroom.domain.integration import Integration
from mailroom.repositories.base import BaseRepository


class IntegrationRepository(BaseRepository[Integration]):
    model = Integration

    async def list_all(self) -> list[Integration]:
        q = self._base_query().order_by(Integration.is_active.desc(), Integration.name)
        return list((await self._session.execute(q)).scalars().all())
