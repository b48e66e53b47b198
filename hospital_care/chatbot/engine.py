"""Core chatbot engine: intent classification, directory lookups, response formatting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from hospital_care.chatbot.extractors import (
    SPECIALTY_KEYWORDS, extract_specialty,
)
from hospital_care.chatbot.intents import (
    EMERGENCY_PHRASES, INTENT_BOOK, INTENT_CANCEL, INTENT_DOCTOR_SEARCH,
    INTENT_EMERGENCY, INTENT_GREETING, INTENT_HOURS, INTENT_SYMPTOM,
    IntentClassifier, mentions_emergency_phrase,
)
from hospital_care.common.logging import get_logger
from hospital_care.data.directory import DirectoryError, DoctorDirectory, DoctorRecord

log = get_logger("engine")


@dataclass(frozen=True)
class ClassificationResult:
    intent: str
    response: str


def _display_name(name: str) -> str:
    return name if name.lower().startswith("dr.") else f"Dr. {name}"


def _hour_range(doc: DoctorRecord) -> str:
    return f"{doc.start_hour}:00 - {doc.end_hour}:00"


class ResponseGenerator:
    """
    Turns an intent (plus the original message) into reply text.

    Only book_appointment and doctor_search touch the directory, with one read
    each. A directory failure is treated as an empty result.
    """

    def __init__(
        self,
        directory: DoctorDirectory,
        emergency_phrases: Tuple[str, ...] = EMERGENCY_PHRASES,
        specialty_keywords: Tuple[Tuple[str, str], ...] = SPECIALTY_KEYWORDS,
    ) -> None:
        self.directory = directory
        self.emergency_phrases = emergency_phrases
        self.specialty_keywords = specialty_keywords
        self._handlers: Dict[str, Callable[[str], str]] = {
            INTENT_GREETING: self._greeting,
            INTENT_BOOK: self._book_appointment,
            INTENT_DOCTOR_SEARCH: self._doctor_search,
            INTENT_HOURS: self._hours,
            INTENT_SYMPTOM: self._symptom_triage,
            INTENT_CANCEL: self._cancel_appointment,
            INTENT_EMERGENCY: self._emergency,
        }

    def respond(self, intent: str, message: str) -> str:
        handler = self._handlers.get(intent, self._fallback)
        return handler(message)

    # ---- Directory reads ----

    def _lookup(self, specialty: Optional[str] = None) -> List[DoctorRecord]:
        try:
            if specialty:
                return self.directory.by_specialty(specialty)
            return self.directory.list_all()
        except DirectoryError as exc:
            log.warning("Doctor lookup failed, treating as empty: %s", exc)
            return []

    # ---- Intent handlers ----

    def _greeting(self, message: str) -> str:
        return (
            "Hello! I'm your HospitalCare assistant. I can help you with:\n\n"
            "• Booking appointments with doctors\n"
            "• Finding specialists by specialty\n"
            "• Visiting hours and hospital information\n"
            "• Basic health questions\n\n"
            "How can I assist you today?"
        )

    def _book_appointment(self, message: str) -> str:
        doctors = self._lookup()
        if not doctors:
            return (
                "I can help you book an appointment. However, there are no doctors "
                "available at the moment. Please try again later."
            )

        parts = ["I can help you book an appointment! Here are our available doctors:\n"]
        for i, doc in enumerate(doctors, 1):
            parts.append(f"{i}. {_display_name(doc.name)} - {doc.specialty}")
            parts.append(f"   Available: {', '.join(doc.days)}")
            parts.append(f"   Hours: {_hour_range(doc)}")
            parts.append("")
        parts.append(
            "Please specify which doctor you'd like to see, or let me know your "
            "preferred specialty and I'll help you find the right doctor."
        )
        return "\n".join(parts)

    def _doctor_search(self, message: str) -> str:
        specialty = extract_specialty(message, self.specialty_keywords)
        doctors = self._lookup(specialty)

        if not doctors:
            known = self._known_specialties()
            return (
                "I couldn't find any doctors matching your criteria. Could you please "
                "specify the specialty you're looking for? "
                f"We have specialists in {known}."
            )

        if specialty:
            parts = [f"Here are our {specialty} specialists:\n"]
        else:
            parts = ["Here are our available doctors:\n"]
        for doc in doctors:
            parts.append(f"• {_display_name(doc.name)} - {doc.specialty}")
            parts.append(f"  Available: {', '.join(doc.days)}")
            parts.append(f"  Hours: {_hour_range(doc)}")
            parts.append("")
        parts.append("Would you like to book an appointment with any of these doctors?")
        return "\n".join(parts)

    def _known_specialties(self) -> str:
        names = list(dict.fromkeys(s for _, s in self.specialty_keywords))
        if len(names) < 2:
            return "".join(names)
        return ", ".join(names[:-1]) + f", and {names[-1]}"

    def _hours(self, message: str) -> str:
        return (
            "🏥 **Hospital Visiting Hours**\n\n"
            "• General Visiting: 10:00 AM - 8:00 PM\n"
            "• ICU Visiting: 4:00 PM - 5:00 PM\n"
            "• Emergency: Open 24/7\n\n"
            "**Clinic Hours by Department:**\n"
            "• Outpatient Clinics: Monday-Saturday, 8:00 AM - 8:00 PM\n"
            "• Diagnostic Services: Monday-Saturday, 7:00 AM - 9:00 PM\n"
            "• Pharmacy: Open 24/7\n\n"
            "Is there anything specific you'd like to know?"
        )

    def _symptom_triage(self, message: str) -> str:
        # uses this generator's own phrase list, not the classifier's
        if mentions_emergency_phrase(message, self.emergency_phrases):
            return (
                "⚠️ **EMERGENCY ALERT** ⚠️\n\n"
                "Based on your symptoms, you need immediate medical attention!\n\n"
                "**Call Emergency Services (911) immediately** or go to the nearest "
                "Emergency Room.\n\n"
                "🚨 Emergency Contact: 911\n"
                "🏥 Hospital Emergency: +1-555-HOSPITAL\n\n"
                "Do not wait - seek help now!"
            )

        return (
            "I understand you're experiencing symptoms. While I can provide general "
            "information, I'm not qualified to diagnose medical conditions.\n\n"
            "**For proper medical advice:**\n"
            "• If symptoms are severe or worsening → Call 911 or visit Emergency\n"
            "• For non-urgent concerns → I can help you book an appointment with a doctor\n"
            "• For general health questions → I'm here to help with information\n\n"
            "Would you like me to help you book an appointment with a doctor?"
        )

    def _cancel_appointment(self, message: str) -> str:
        return (
            "I can help you cancel your appointment. To proceed, please provide:\n\n"
            "• Your appointment reference ID, or\n"
            "• The date and doctor name of your appointment\n\n"
            "Note: You can also view and manage your appointments through your patient portal."
        )

    def _emergency(self, message: str) -> str:
        return (
            "🚨 **EMERGENCY RESPONSE** 🚨\n\n"
            "If this is a life-threatening emergency:\n\n"
            "**CALL 911 IMMEDIATELY**\n\n"
            "🏥 Hospital Emergency Room: Open 24/7\n"
            "📞 Emergency Hotline: +1-555-HOSPITAL\n"
            "📍 Address: 123 Medical Center Drive\n\n"
            "For urgent but non-life-threatening issues, our emergency department is "
            "always open. Do not wait if you believe your condition is serious!"
        )

    def _fallback(self, message: str) -> str:
        return (
            "I'm not sure I understand. I can help you with:\n\n"
            "• **Book an appointment** - Schedule a visit with our doctors\n"
            "• **Find a doctor** - Search by specialty\n"
            "• **Visiting hours** - Get hospital timing information\n"
            "• **Health questions** - General medical information\n"
            "• **Emergency help** - Urgent medical assistance\n\n"
            "What would you like help with?"
        )


class ChatEngine:
    """Stateless classify-then-respond pipeline; safe to share across requests."""

    def __init__(
        self,
        directory: DoctorDirectory,
        classifier: Optional[IntentClassifier] = None,
        generator: Optional[ResponseGenerator] = None,
    ) -> None:
        self.classifier = classifier or IntentClassifier()
        self.generator = generator or ResponseGenerator(
            directory, emergency_phrases=self.classifier.patterns.emergency_phrases
        )

    def handle(self, message: str) -> ClassificationResult:
        intent = self.classifier.classify(message)
        return ClassificationResult(intent=intent, response=self.generator.respond(intent, message))

    def respond(self, message: str) -> str:
        return self.handle(message).response
