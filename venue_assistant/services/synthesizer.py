"""Offline answer construction from the top-ranked knowledge chunks.

Used when no remote provider produced an answer. Deterministic, no network,
and the message is never empty.
"""

import re
from typing import Callable

from venue_assistant.core.config import settings
from venue_assistant.schemas.chat import AIResponse
from venue_assistant.services.knowledge.store import KnowledgeChunk, KnowledgeStore
from venue_assistant.services.retrieval.ranker import RetrievalResult, retrieve_knowledge

_path_line_re = re.compile(r"^[ \t]*PATH:[ \t]*(.+?)[ \t]*$", re.MULTILINE)
_step_re = re.compile(r"^[ \t]*(\d+\.[ \t]+\S.*?)[ \t]*$", re.MULTILINE)
_markers_re = re.compile(r"STEP-BY-STEP:|STEPS?:|WHAT YOU'LL SEE:|HOW IT WORKS:")
_multi_newline_re = re.compile(r"\n{3,}")
_fragment_re = re.compile(r"[.!?\n]")

_greeting_re = re.compile(r"\b(?:hi|hello|hey)\b|who are you")
_help_re = re.compile(r"help|support|contact|issue|problem|lost|missing")
_points_re = re.compile(r"points?|credits?|buy|purchase")
_booking_re = re.compile(r"book|reserve|venue|event|ticket")

MAX_STEPS = 6
MAX_CLEAN_CHARS = 500
MAX_FRAGMENTS = 6
RELATED_UNDER_CHARS = 600


def clean_content(content: str) -> str:
    """
    Strip structural markers from raw chunk text:
      - PATH: lines are dropped (the path is surfaced separately)
      - STEPS:/STEP-BY-STEP:, WHAT YOU'LL SEE:, HOW IT WORKS: markers are removed
      - 3+ newlines collapse to 2
    Anything over 500 chars is cut to its first 6 sentence/line fragments.
    """
    clean = _path_line_re.sub("", content)
    clean = _markers_re.sub("", clean)
    clean = _multi_newline_re.sub("\n\n", clean).strip()

    if len(clean) > MAX_CLEAN_CHARS:
        fragments = [f.strip() for f in _fragment_re.split(clean) if f.strip()]
        clean = ". ".join(fragments[:MAX_FRAGMENTS]).strip()
        if not clean.endswith((".", "!", "?")):
            clean += "."

    return clean


def find_path(content: str) -> str | None:
    m = _path_line_re.search(content)
    return m.group(1) if m else None


def find_steps(content: str, limit: int = MAX_STEPS) -> list[str]:
    return _step_re.findall(content)[:limit]


class LocalSynthesizer:
    def __init__(self, store: KnowledgeStore | None = None, max_chunks: int | None = None):
        self.store = store
        self.max_chunks = max_chunks or settings.FALLBACK_MAX_CHUNKS
        self.support_email = settings.SUPPORT_EMAIL
        # first match wins
        self._routes: tuple[tuple[Callable[[str], bool], Callable[[str, KnowledgeChunk], str]], ...] = (
            (lambda msg: bool(_greeting_re.search(msg)), self._greeting),
            (lambda msg: any(p in msg for p in ("how to", "how do", "how can")), self._how_to),
            (lambda msg: any(p in msg for p in ("what is", "what are", "tell me about")), self._explain),
            (lambda msg: "where" in msg, self._where),
            (lambda msg: bool(_help_re.search(msg)), self._help),
            (lambda msg: bool(_points_re.search(msg)), self._points),
            (lambda msg: "vendor" in msg, self._vendor),
            (lambda msg: bool(_booking_re.search(msg)), self._booking),
        )

    def synthesize(self, user_message: str, retrieval: RetrievalResult | None = None) -> AIResponse:
        if retrieval is None:
            retrieval = retrieve_knowledge(user_message, max_chunks=self.max_chunks, store=self.store)
        chunks = retrieval.chunks

        if not chunks:
            return AIResponse(success=True, message=self.introduction(), provider="fallback")

        msg = user_message.lower()
        top = chunks[0]
        response = ""
        for matches, handler in self._routes:
            if matches(msg):
                response = handler(msg, top)
                break
        else:
            response = clean_content(top.content)

        if len(chunks) > 1 and len(response) < RELATED_UNDER_CHARS:
            related = ", ".join(c.title for c in chunks[1:3])
            response += f"\n\n💡 **Related:** {related}"

        if not response.strip():
            response = self.introduction()

        return AIResponse(success=True, message=response, provider="fallback")

    def introduction(self) -> str:
        return (
            "Hey there! 👋 I'm the EventVenue Assistant, created by Pranai and his team.\n\n"
            "Here's what I can help you with:\n\n"
            "**For Booking:**\n"
            "- Finding and booking venues for any occasion\n"
            "- Getting event tickets\n"
            "- Using your 2000 free signup points\n\n"
            "**For Vendors:**\n"
            "- Listing your venue or event\n"
            "- Managing bookings and earnings\n\n"
            "**Need Help?**\n"
            f"Drop an email to {self.support_email}\n\n"
            "What would you like to know about?"
        )

    def _greeting(self, msg: str, top: KnowledgeChunk) -> str:
        return (
            "Hey! 👋 I'm the EventVenue AI Assistant, built by Pranai and his team!\n\n"
            "I can help with booking venues, getting event tickets and managing your points. "
            "Whether you're booking something or a vendor listing your space, I've got you covered!\n\n"
            "What can I help you with today?"
        )

    def _how_to(self, msg: str, top: KnowledgeChunk) -> str:
        steps = find_steps(top.content)
        if not steps:
            return f"Here's what you need to know about that:\n\n{clean_content(top.content)}"

        response = "Great question! Here's how you can do that:\n\n" + "\n".join(steps)
        path = find_path(top.content)
        if path:
            response += f"\n\n📍 **Go to:** {path}"
        return response

    def _explain(self, msg: str, top: KnowledgeChunk) -> str:
        return f"Let me explain that for you! 😊\n\n{clean_content(top.content)}"

    def _where(self, msg: str, top: KnowledgeChunk) -> str:
        path = find_path(top.content)
        if path:
            return f"You can find that at **{path}** 📍\n\n{clean_content(top.content)}"
        return f"Here's where to look:\n\n{clean_content(top.content)}"

    def _help(self, msg: str, top: KnowledgeChunk) -> str:
        if "lost" in msg or "missing" in msg:
            return (
                "I'm here to help! 🤝\n\n"
                "**For lost/missing points:**\n"
                "1. First, check your points history at /user/points-history\n"
                f"2. If they're really missing, email **{self.support_email}**\n"
                '3. Or go to /user/credits and click "Request Free Credits"\n\n'
                "The team usually responds within 24-48 hours and will investigate!"
            )
        return (
            "I'm here to help! 🤝\n\n"
            "**Best ways to get help:**\n"
            f"- 📧 Email: **{self.support_email}** (the admin team responds)\n"
            "- 💬 Ask me anything here!\n"
            "- 📄 Check the Help page at /help\n\n"
            "What specifically do you need help with?"
        )

    def _points(self, msg: str, top: KnowledgeChunk) -> str:
        if "buy" in msg or "purchase" in msg or "get more" in msg:
            return (
                "Want more points? Here's how! 💰\n\n"
                "1. Go to your dashboard or /user/credits\n"
                '2. Click "Buy Credits"\n'
                "3. Enter the amount and pay via PayPal\n"
                "4. Admin approves → points added!\n\n"
                "**Tip:** You already have 2000 free points from signup!"
            )
        if "use" in msg or "spend" in msg:
            return (
                "Using points is easy! At checkout you'll see three options:\n\n"
                "- **Full Points** - pay entirely with your balance\n"
                "- **Full PayPal** - pay with card/PayPal\n"
                "- **Hybrid** - use some points and pay the rest with PayPal\n\n"
                "Flexible for any budget! 🎉"
            )
        return f"Great question about points! 💰\n\n{clean_content(top.content)}"

    def _vendor(self, msg: str, top: KnowledgeChunk) -> str:
        if "become" in msg or "register" in msg or "start" in msg:
            return (
                "Want to become a vendor? Awesome! 🏪\n\n"
                '1. Go to /signup and select "VENDOR"\n'
                "2. Fill in your business details\n"
                "3. Submit and wait for admin approval (24-48 hrs)\n"
                "4. Once approved, start listing venues and events!\n\n"
                "You'll have your own dashboard to manage everything."
            )
        if "withdraw" in msg or "paid" in msg or "money" in msg:
            return (
                "Here's how you get your money! 💵\n\n"
                "1. Check your earnings in the Vendor Dashboard\n"
                "2. Go to the Withdrawals section\n"
                '3. Click "Request Withdrawal"\n'
                "4. Enter the amount and submit\n"
                "5. Admin approves → money is sent to your account!\n\n"
                "Make sure your payment details are up to date in your profile!"
            )
        return f"Here's what you need to know about vendors:\n\n{clean_content(top.content)}"

    def _booking(self, msg: str, top: KnowledgeChunk) -> str:
        if "venue" in msg:
            return (
                "Booking a venue is simple! 🏠\n\n"
                "1. Browse venues at /venues\n"
                "2. Click one you like to see details\n"
                "3. Check the availability calendar\n"
                '4. Select your dates and click "Book Now"\n'
                "5. Choose payment (Points/PayPal/Both)\n"
                "6. Confirm and you're done! 🎉\n\n"
                "Remember, you have 2000 free points to use!"
            )
        if "event" in msg or "ticket" in msg:
            return (
                "Getting event tickets is easy! 🎫\n\n"
                "1. Browse events at /events\n"
                "2. Click on the event you want\n"
                "3. Choose your seat category (VIP, General, etc.)\n"
                "4. Select the number of tickets\n"
                "5. Pay with Points or PayPal\n"
                "6. Get your confirmation! 🎉"
            )
        return clean_content(top.content)
