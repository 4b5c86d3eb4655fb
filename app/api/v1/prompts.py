RESPONSE_FORMAT = (
    "Plant: [common name]\n"
    "Species: [scientific name, or leave blank]\n"
    "Plant Size: [Small, Medium or Large]\n"
    "Growth Stage: [Seedling, Young, Mature or Established]\n"
    "Description: [one or two sentences about the plant]\n"
    "\n"
    "HEALTH ASSESSMENT: [is the plant healthy? describe any visible problems]\n"
    "\n"
    "Care Recommendations:\n"
    "- Watering: [how often and how much, e.g. every 7 days]\n"
    "- Light Requirements: [light level]\n"
    "- Temperature: [ideal range]\n"
    "- Soil: [soil type]\n"
    "- Fertilizing: [schedule]\n"
    "- Humidity: [ideal humidity]\n"
    "\n"
    "Interesting Facts:\n"
    "1. [fact]\n"
    "2. [fact]\n"
    "3. [fact]\n"
    "4. [fact]\n"
)

PHOTO_INSTRUCTIONS = (
    "IMPORTANT:\n"
    "- Be confident in your plant identification\n"
    "- Focus on what you can actually see in the image\n"
    "- Only give care recommendations relevant to the plant's current condition\n"
    "- Never say \"unable to identify\"; give your best assessment from visible features\n"
    "- Keep every label exactly as written above"
)

CONTENT_INSTRUCTIONS = (
    "IMPORTANT:\n"
    "- Focus on practical care information\n"
    "- Give actionable, plant-specific advice\n"
    "- Keep every label exactly as written above"
)


def build_photo_prompt(plant_name=None):
    hint = f"The owner calls this plant \"{plant_name}\".\n\n" if plant_name else ""
    return (
        "Analyze this plant photo and answer using exactly this format:\n\n"
        f"{hint}{RESPONSE_FORMAT}\n{PHOTO_INSTRUCTIONS}"
    )


def build_content_prompt(plant_name, species=None):
    subject = f"{plant_name} ({species})" if species else plant_name
    return (
        f"Provide focused care recommendations for a {subject}. "
        "Answer using exactly this format:\n\n"
        f"{RESPONSE_FORMAT}\n{CONTENT_INSTRUCTIONS}"
    )
