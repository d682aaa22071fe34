"""In-memory stand-ins for the remote collaborators."""

from leadbot.backends.base import (
    AssistantBackend,
    AssistantReply,
    LeadIntake,
    PropertyCatalog,
    RemoteServiceError,
)
from leadbot.models.property import PropertySnapshot


CATALOG_DATA = {
    "title": "Shanti Heights",
    "location": "Vesu, Surat",
    "area": "1850 sq ft",
    "price": "₹1.2 Cr",
    "status": "Ready to move",
    "amenities": ["Clubhouse", "Jain temple"],
    "isForJain": True,
    "description": "3 BHK in a gated community",
    "images": ["/img/front.jpg", "/img/lobby.jpg"],
}


class FakeAssistant(AssistantBackend):
    """Replies with queued strings, or raises queued exceptions."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests = []

    def queue(self, *replies):
        self.replies.extend(replies)

    async def chat(self, request):
        self.requests.append(request)
        reply = self.replies.pop(0) if self.replies else "Tell me more."
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, AssistantReply):
            return reply
        return AssistantReply(message=reply)


class FakeIntake(LeadIntake):
    def __init__(self, fail=False):
        self.fail = fail
        self.envelopes = []

    async def submit(self, envelope):
        self.envelopes.append(envelope)
        if self.fail:
            raise RemoteServiceError("intake down")


class FakeCatalog(PropertyCatalog):
    def __init__(self, data=CATALOG_DATA, error=None):
        self.data = data
        self.error = error
        self.calls = 0

    async def fetch(self):
        self.calls += 1
        if self.error:
            raise self.error
        return PropertySnapshot.from_catalog(self.data) if self.data else None
