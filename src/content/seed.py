"""Default records written to an empty store on first load."""

from __future__ import annotations

from datetime import datetime

from medcms.content.models import ContentRecord, utc_now

_SEED_DATA: list[dict[str, object]] = [
    {
        "id": "1",
        "type": "disclaimer",
        "title": "Medical Disclaimer",
        "content": (
            "This tool provides general health information only and is not a substitute "
            "for professional medical advice, diagnosis, or treatment. Always consult "
            "your doctor for medical concerns."
        ),
        "shortDescription": "Legal disclaimer for medical information",
        "detailedDescription": (
            "Comprehensive legal disclaimer explaining the limitations of the medical "
            "information provided by this application."
        ),
        "metadata": {
            "category": "legal",
            "tags": ["disclaimer", "legal", "medical"],
            "author": "Legal Team",
            "reviewedBy": "Chief Medical Officer",
            "medicallyReviewed": True,
            "version": 1,
            "status": "approved",
            "language": "en",
            "region": "global",
        },
    },
    {
        "id": "2",
        "type": "condition",
        "title": "Common Cold",
        "content": (
            "A viral infection of the upper respiratory tract causing mild to "
            "moderate symptoms."
        ),
        "shortDescription": "Viral upper respiratory infection",
        "detailedDescription": (
            "The common cold is a viral infection that affects the nose, throat, and "
            "upper respiratory system. It is one of the most frequent illnesses, "
            "especially during colder months."
        ),
        "metadata": {
            "urgency": "monitor",
            "severity": "mild",
            "category": "respiratory",
            "subcategory": "viral infections",
            "tags": ["viral", "respiratory", "common", "contagious"],
            "symptoms": ["runny nose", "sneezing", "cough", "sore throat", "mild headache"],
            "relatedConditions": ["flu", "sinusitis", "bronchitis"],
            "ageGroups": ["child", "teen", "adult", "elderly"],
            "gender": "both",
            "prevalence": "common",
            "duration": "7-10 days",
            "onset": "gradual",
            "triggers": [
                "cold weather",
                "stress",
                "lack of sleep",
                "close contact with infected person",
            ],
            "riskFactors": ["weakened immune system", "age under 6", "crowded environments"],
            "complications": ["sinusitis", "ear infection", "bronchitis"],
            "whenToSeekHelp": [
                "fever over 101.3°F",
                "symptoms lasting more than 10 days",
                "severe headache",
                "difficulty breathing",
            ],
            "homeRemedies": ["rest", "fluids", "warm salt water gargle", "humidifier"],
            "medications": ["acetaminophen", "ibuprofen", "decongestants"],
            "lifestyle": ["hand washing", "avoid touching face", "get adequate sleep"],
            "prevention": [
                "frequent hand washing",
                "avoid close contact with sick people",
                "maintain healthy lifestyle",
            ],
            "followUp": (
                "Monitor symptoms and seek medical care if they worsen or persist "
                "beyond 10 days"
            ),
            "sources": ["CDC", "Mayo Clinic", "WHO"],
            "author": "Dr. Sarah Johnson",
            "reviewedBy": "Medical Review Board",
            "medicallyReviewed": True,
            "version": 2,
            "status": "approved",
            "language": "en",
            "region": "global",
        },
    },
    {
        "id": "3",
        "type": "symptom",
        "title": "Persistent Headache",
        "content": (
            "Ongoing head pain that lasts for several hours or days, potentially "
            "indicating various underlying conditions."
        ),
        "shortDescription": "Continuous head pain requiring evaluation",
        "detailedDescription": (
            "A persistent headache is characterized by continuous or recurring head pain "
            "that may vary in intensity and location. It can be a symptom of various "
            "conditions ranging from tension to more serious medical issues."
        ),
        "metadata": {
            "urgency": "moderate",
            "severity": "moderate",
            "category": "neurological",
            "subcategory": "pain",
            "tags": ["headache", "pain", "neurological", "chronic"],
            "relatedConditions": [
                "migraine",
                "tension headache",
                "cluster headache",
                "sinusitis",
            ],
            "ageGroups": ["teen", "adult", "elderly"],
            "gender": "both",
            "prevalence": "common",
            "duration": "variable",
            "onset": "gradual",
            "triggers": [
                "stress",
                "dehydration",
                "lack of sleep",
                "eye strain",
                "certain foods",
            ],
            "riskFactors": ["stress", "poor posture", "irregular sleep", "dehydration"],
            "complications": ["medication overuse headache", "chronic daily headache"],
            "whenToSeekHelp": [
                "sudden severe headache",
                "headache with fever",
                "vision changes",
                "confusion",
            ],
            "homeRemedies": [
                "rest in dark room",
                "cold/warm compress",
                "hydration",
                "gentle massage",
            ],
            "medications": ["acetaminophen", "ibuprofen", "aspirin"],
            "lifestyle": ["regular sleep schedule", "stress management", "proper hydration"],
            "prevention": [
                "stress management",
                "regular exercise",
                "adequate sleep",
                "proper nutrition",
            ],
            "followUp": "Keep headache diary and consult doctor if frequency increases",
            "sources": ["American Headache Society", "Mayo Clinic"],
            "author": "Dr. Michael Chen",
            "reviewedBy": "Neurology Department",
            "medicallyReviewed": True,
            "version": 1,
            "status": "approved",
            "language": "en",
        },
    },
    {
        "id": "4",
        "type": "treatment",
        "title": "Hydration Therapy",
        "content": (
            "Systematic approach to maintaining proper fluid balance in the body to "
            "support recovery and prevent complications."
        ),
        "shortDescription": "Fluid replacement and maintenance therapy",
        "detailedDescription": (
            "Hydration therapy involves the careful management of fluid intake to "
            "maintain proper electrolyte balance and support the body's natural "
            "healing processes."
        ),
        "metadata": {
            "category": "supportive care",
            "subcategory": "fluid management",
            "tags": ["hydration", "fluids", "electrolytes", "supportive care"],
            "ageGroups": ["infant", "child", "teen", "adult", "elderly"],
            "gender": "both",
            "prevalence": "common",
            "duration": "as needed",
            "whenToSeekHelp": [
                "signs of severe dehydration",
                "inability to keep fluids down",
                "decreased urination",
            ],
            "homeRemedies": ["water", "electrolyte solutions", "clear broths", "herbal teas"],
            "lifestyle": [
                "regular fluid intake",
                "monitor urine color",
                "increase intake during illness",
            ],
            "prevention": [
                "regular water intake",
                "limit caffeine and alcohol",
                "increase fluids in hot weather",
            ],
            "followUp": "Monitor hydration status and adjust intake as needed",
            "sources": ["WHO", "CDC", "American Academy of Pediatrics"],
            "author": "Dr. Lisa Rodriguez",
            "reviewedBy": "Emergency Medicine Department",
            "medicallyReviewed": True,
            "version": 1,
            "status": "approved",
            "language": "en",
        },
    },
    {
        "id": "5",
        "type": "prevention",
        "title": "Hand Hygiene Protocol",
        "content": (
            "Comprehensive hand washing and sanitization practices to prevent the "
            "spread of infectious diseases."
        ),
        "shortDescription": "Proper hand cleaning techniques for infection prevention",
        "detailedDescription": (
            "Hand hygiene is one of the most effective ways to prevent the spread of "
            "infections. This protocol outlines proper techniques for hand washing and "
            "sanitization."
        ),
        "metadata": {
            "category": "infection control",
            "subcategory": "hygiene",
            "tags": ["hand washing", "hygiene", "infection prevention", "sanitization"],
            "ageGroups": ["child", "teen", "adult", "elderly"],
            "gender": "both",
            "prevalence": "common",
            "duration": "20 seconds minimum",
            "triggers": [
                "before eating",
                "after bathroom use",
                "after coughing/sneezing",
                "after touching surfaces",
            ],
            "prevention": [
                "regular hand washing",
                "alcohol-based sanitizer",
                "avoid touching face",
            ],
            "lifestyle": [
                "carry hand sanitizer",
                "teach children proper technique",
                "make it a habit",
            ],
            "sources": ["CDC", "WHO", "FDA"],
            "author": "Infection Control Team",
            "reviewedBy": "Public Health Department",
            "medicallyReviewed": True,
            "version": 3,
            "status": "approved",
            "language": "en",
            "region": "global",
        },
    },
]


def default_records(now: datetime | None = None) -> list[ContentRecord]:
    """Build the seed set, stamping every record with *now*."""
    stamp = now or utc_now()
    records: list[ContentRecord] = []
    for raw in _SEED_DATA:
        record = ContentRecord.model_validate(raw)
        record.metadata.last_updated = stamp
        records.append(record)
    return records
