from vigenere_analyzer.services.pipeline.models import AnalysisOptions, CandidateResult


class ExplanationGenerator:
    """
    Generates human-readable explanations for key search results.

    All explanations are grounded in the computed scores.
    """

    # Reference values for comparisons
    ENGLISH_IOC = 0.0667

    def generate(
        self,
        options: AnalysisOptions,
        results: list[CandidateResult],
    ) -> list[str]:
        """
        Generate explanations for an analysis.

        Args:
            options: Options the search ran with
            results: Ranked candidates, best first

        Returns:
            List of explanation strings
        """
        explanations = [self._explain_search(options)]

        if not results:
            explanations.append("No viable plaintext candidates found.")
            return explanations

        best = results[0]
        explanations.append(
            f"Best key: '{best.key}' (length {best.key_length}, "
            f"found by {best.method.replace('_', ' ')}), "
            f"composite score {best.total_score:.0f}/100."
        )
        if options.use_ic:
            explanations.append(
                f"Index of Coincidence: {best.ic:.4f}. "
                f"{self.interpret_ioc(best.ic, len(options.alphabet))}"
            )
        if options.use_ngrams:
            explanations.append(
                f"Mean n-gram log-likelihood: {best.ngram_score:.2f} per window."
            )
        if options.use_dict:
            explanations.append(
                f"Dictionary coverage: {best.dict_score * 100:.0f}% of words recognized."
            )

        # Show preview of plaintext
        preview = best.plaintext[:100]
        if len(best.plaintext) > 100:
            preview += "..."
        explanations.append(f'Plaintext preview: "{preview}"')

        if len(results) > 1:
            explanations.append(f"{len(results) - 1} alternative candidate(s) also found.")

        return explanations

    def _explain_search(self, options: AnalysisOptions) -> str:
        if options.known_plaintext:
            method = (
                "Key shifts were deduced from the known plaintext; "
                "undetermined positions were enumerated."
            )
        else:
            method = (
                "Letter frequencies of each key position were matched against "
                "expected English frequencies to determine the key."
            )
        return (
            f"Tested key lengths {options.min_key_length} to {options.max_key_length} "
            f"over a {len(options.alphabet)}-character alphabet. {method}"
        )

    def interpret_ioc(self, ioc: float, alphabet_size: int) -> str:
        """Interpret the Index of Coincidence value."""
        random_ioc = 1 / alphabet_size if alphabet_size else 0.0

        if ioc >= 0.06:
            return (
                f"This is close to English ({self.ENGLISH_IOC:.4f}), "
                "consistent with a correct decryption."
            )
        elif ioc > random_ioc * 1.3:
            return "This is between English and random, suggesting a partially correct key."
        else:
            return (
                f"This is close to random ({random_ioc:.4f}), "
                "suggesting the key is wrong."
            )
